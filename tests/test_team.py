"""Tests for team enrichment."""

from compass_catalog.team import TeamEnricher

COMPASS_URL = "https://acme.atlassian.net/compass"
OWNER = "ari:cloud:identity::team/team-1"


class TestFileMode:
    def test_writes_team_named_after_its_id(self, catalog):
        team = TeamEnricher(catalog, COMPASS_URL).enrich(OWNER)

        assert team.id == "team-1"
        assert team.name == "team-1"
        stored = catalog.get_team("team-1")
        assert stored.markdown == "## Links\n\n * [Atlassian Compass Team](https://acme.atlassian.net/compass/people/team/team-1)"

    def test_shared_owner_written_once(self, catalog, monkeypatch):
        writes = []
        original = catalog.write_team
        monkeypatch.setattr(catalog, "write_team", lambda team, **kw: (writes.append(team.id), original(team, **kw)))
        enricher = TeamEnricher(catalog, COMPASS_URL)

        enricher.enrich(OWNER)
        assert enricher.enrich(OWNER) is None

        assert writes == ["team-1"]
        assert enricher.processed == {"team-1"}

    def test_no_owner(self, catalog):
        assert TeamEnricher(catalog, COMPASS_URL).enrich(None) is None

    def test_existing_team_is_overwritten_on_next_run(self, catalog):
        TeamEnricher(catalog, COMPASS_URL).enrich(OWNER)
        TeamEnricher(catalog, COMPASS_URL).enrich(OWNER)

        assert catalog.get_team("team-1") is not None


class TestApiMode:
    def test_display_name_and_members_from_compass(self, catalog, fake_compass, platform_team):
        client = fake_compass(teams={"team-1": platform_team})

        team = TeamEnricher(catalog, COMPASS_URL, compass_client=client).enrich(OWNER)

        assert client.team_lookups == ["team-1"]
        assert team.name == "Platform &lt;Core&gt;"
        assert team.members == ["Ada-Lovelace"]
        user = catalog.get_user("Ada-Lovelace")
        assert user.name == "Ada Lovelace"
        assert user.avatarUrl == "https://avatars.example.com/ada.png"
        assert user.email == "ada@acme.com"

    def test_lookup_failure_skips_team(self, catalog, fake_compass, caplog):
        client = fake_compass()
        enricher = TeamEnricher(catalog, COMPASS_URL, compass_client=client)

        assert enricher.enrich(OWNER) is None
        assert enricher.enrich(OWNER) is None

        assert client.team_lookups == ["team-1"]
        assert catalog.get_team("team-1") is None
        assert "Could not resolve team team-1" in caplog.text

    def test_dry_run_writes_nothing(self, catalog, fake_compass, platform_team, caplog):
        caplog.set_level("INFO")
        client = fake_compass(teams={"team-1": platform_team})

        team = TeamEnricher(catalog, COMPASS_URL, compass_client=client, dry_run=True).enrich(OWNER)

        assert team.members == ["Ada-Lovelace"]
        assert not catalog.root.exists()
        assert "Would write team team-1" in caplog.text
