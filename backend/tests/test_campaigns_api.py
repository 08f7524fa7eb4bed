"""Campaign API tests: create, record outcomes, generate the next battle."""
import unittest

from fastapi.testclient import TestClient

from backend.app.api.deps import get_campaign_repository, get_scenario_repository, get_settings
from backend.app.config import GenerationSettings
from backend.app.core.repositories import InMemoryCampaignRepository, InMemoryScenarioRepository


class TestCampaignFlow(unittest.TestCase):
    def setUp(self):
        from backend.main import app
        self.app = app
        self.campaigns = InMemoryCampaignRepository()
        self.scenarios = InMemoryScenarioRepository()
        app.dependency_overrides[get_settings] = lambda: GenerationSettings(ai_enabled=False)
        app.dependency_overrides[get_campaign_repository] = lambda: self.campaigns
        app.dependency_overrides[get_scenario_repository] = lambda: self.scenarios
        self.client = TestClient(app)

    def tearDown(self):
        self.app.dependency_overrides.clear()

    def _create(self, **body):
        r = self.client.post("/api/campaigns", json=body)
        self.assertEqual(r.status_code, 201, r.text)
        return r.json()

    def test_create_and_fetch_campaign(self):
        created = self._create(name="Third War", mode="planetary", planetName="Armageddon")
        self.assertEqual(created["planetName"], "Armageddon")
        self.assertEqual(created["episodes"], [])
        self.assertEqual(len(created["code"]), 6)

        r = self.client.get(f"/api/campaigns/{created['id']}")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["name"], "Third War")

        listed = self.client.get("/api/campaigns").json()
        self.assertEqual([c["id"] for c in listed], [created["id"]])

    def test_create_defaults_bad_mode_to_planetary(self):
        created = self._create(name="", mode="galactic")
        self.assertEqual(created["mode"], "planetary")
        self.assertEqual(created["name"], "Untitled Campaign")

    def test_outcomes_append_and_feed_continuity(self):
        campaign = self._create(name="Third War", mode="planetary", planetName="Armageddon")
        cid = campaign["id"]

        first = self.client.post(f"/api/campaigns/{cid}/generate", json={"stakes": "Hold the spire"})
        self.assertEqual(first.status_code, 200, first.text)
        first_body = first.json()
        self.assertFalse(first_body["aiUsed"])
        self.assertIn("Continuity → Mode=planetary; Planet=Armageddon", first_body["narrative"])
        self.assertNotIn("Prior=", first_body["narrative"])

        r = self.client.post(f"/api/campaigns/{cid}/outcomes", json={
            "scenarioId": first_body["scenarioId"],
            "planetName": "Armageddon",
            "factions": ["Orks", "Astra Militarum"],
            "outcomeSummary": "Orks repelled",
            "rpDeltaByFaction": {"Orks": 1, "Astra Militarum": 3},
        })
        self.assertEqual(r.status_code, 200, r.text)
        self.assertEqual(len(r.json()["episodes"]), 1)

        second = self.client.post(
            f"/api/campaigns/{cid}/generate",
            json={"requestedPlanet": "Cadia", "stakes": "Break out"},
        )
        self.assertEqual(second.status_code, 200, second.text)
        narrative = second.json()["narrative"]
        self.assertTrue(narrative.startswith("# Third War — Cadia\n"))
        self.assertIn("Next=Cadia", narrative)
        self.assertIn("Prior=Armageddon: Orks repelled", narrative)

        stored = self.client.get(f"/api/campaigns/{cid}").json()
        self.assertEqual(len(stored["scenarioIds"]), 2)
        history = self.client.get("/api/scenarios", params={"campaignId": cid}).json()
        self.assertEqual(len(history), 2)

    def test_unknown_campaign_is_404_envelope(self):
        for method, path in (
            ("get", "/api/campaigns/missing"),
            ("post", "/api/campaigns/missing/outcomes"),
            ("post", "/api/campaigns/missing/generate"),
        ):
            r = getattr(self.client, method)(path, json={}) if method == "post" else self.client.get(path)
            self.assertEqual(r.status_code, 404, path)
            payload = r.json()
            self.assertEqual(payload["error_code"], "CAMPAIGNS_HTTP_404")
            self.assertEqual(payload["node"], "campaigns")


class TestRootEndpoints(unittest.TestCase):
    def test_root_and_health(self):
        from backend.main import app
        client = TestClient(app)
        self.assertEqual(client.get("/health").json(), {"status": "healthy"})
        self.assertEqual(client.get("/").json()["message"], "Warhost Chronicle API")


if __name__ == "__main__":
    unittest.main()
