"""GraphQL documents sent to the Atlassian gateway."""

SEARCH_COMPONENTS_QUERY = """
query searchComponents($cloudId: String!, $after: String, $first: Int, $types: [CompassComponentType!]) {
  compass {
    searchComponents(
      cloudId: $cloudId
      query: { after: $after, first: $first, componentTypes: $types }
    ) {
      __typename
      ... on CompassSearchComponentConnection {
        nodes {
          component {
            id
            name
            typeId
            description
            ownerId
            fields {
              definition { name }
              ... on CompassEnumField { value }
            }
            links { type url name }
            relationships(query: { relationshipType: DEPENDS_ON }) {
              ... on CompassRelationshipConnection {
                nodes {
                  relationshipType
                  endNode { id }
                }
              }
            }
            labels { name }
            customFields {
              definition { name }
              ... on CompassCustomTextField { textValue }
              ... on CompassCustomBooleanField { booleanValue }
              ... on CompassCustomNumberField { numberValue }
            }
            scorecardScores { scorecardId totalScore maxTotalScore }
          }
        }
        pageInfo { hasNextPage endCursor }
      }
      ... on QueryError { message }
    }
  }
}
"""

SCORECARDS_QUERY = """
query scorecards($cloudId: ID!) {
  compass {
    scorecards(cloudId: $cloudId) {
      ... on CompassScorecardConnection {
        nodes { id name }
      }
    }
  }
}
"""

TEAM_BY_ID_QUERY = """
query teamById($id: ID!, $siteId: String!) {
  team {
    teamV2(id: $id, siteId: $siteId) {
      id
      displayName
      description
      members {
        nodes {
          member {
            name
            picture
            ... on AtlassianAccountUser { email }
            ... on CustomerUser { email }
          }
        }
      }
    }
  }
}
"""

UPDATE_COMPONENT_OWNER_MUTATION = """
mutation updateComponentOwner($input: UpdateCompassComponentInput!) {
  compass {
    updateComponent(input: $input) {
      success
      errors { message }
      componentDetails { id ownerId }
    }
  }
}
"""

LIST_TEAMS_QUERY = """
query listTeams($orgAri: ID!, $siteId: ID!) {
  team {
    teamSearchV2(organizationId: $orgAri, siteId: $siteId, first: 200) {
      __typename
      ... on TeamSearchResultConnectionV2 {
        nodes {
          team { id displayName }
        }
      }
    }
  }
}
"""

CREATE_TEAM_MUTATION = """
mutation createTeam($input: TeamCreateTeamInput!) {
  team {
    createTeam(input: $input) @optIn(to: "Team-crud") {
      success
      errors { message }
      team { id displayName }
    }
  }
}
"""
