"""Request-level tests for the group, prediction and bingo blueprints."""

import unittest
from unittest.mock import patch

from mockfirestore import MockFirestore

from predictionbingo import create_app

from .mock_utils import patch_mockfirestore


class RoutesTestCase(unittest.TestCase):
    def setUp(self):
        patch_mockfirestore()
        self.db = MockFirestore()
        self.patcher = patch("firebase_admin.firestore.client", return_value=self.db)
        self.patcher.start()
        self.addCleanup(self.patcher.stop)

        self.app = create_app({"TESTING": True, "WTF_CSRF_ENABLED": False})
        self.alice = self._client("alice")
        self.bob = self._client("bob")

    def _client(self, username):
        client = self.app.test_client()
        response = client.post("/auth/session", data={"username": username})
        self.assertEqual(response.status_code, 200)
        return client

    def _create_group(self, name="Friends"):
        response = self.alice.post("/group/", data={"name": name})
        self.assertEqual(response.status_code, 201)
        return response.get_json()["data"]["group"]["id"]

    def _start_play(self, group_id):
        self.bob.post(f"/group/{group_id}/join")
        self.alice.post(
            f"/group/{group_id}/predictions", json={"predictions": ["Rain", "Sun"]}
        )
        return self.bob.post(
            f"/group/{group_id}/predictions", json={"predictions": ["Snow"]}
        )

    def test_session(self):
        body = self.alice.get("/auth/session").get_json()
        self.assertEqual(body["data"]["username"], "alice")
        self.assertTrue(self.db.collection("users").document("alice").get().exists)

        self.alice.delete("/auth/session")
        body = self.alice.get("/auth/session").get_json()
        self.assertIsNone(body["data"]["username"])

    def test_invalid_username(self):
        client = self.app.test_client()
        response = client.post("/auth/session", data={"username": "a/b"})
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.get_json()["success"])

    def test_reserved_usernames(self):
        client = self.app.test_client()
        for username in (".", "..", " .. ", "__name__", "__x__"):
            response = client.post("/auth/session", data={"username": username})
            self.assertEqual(response.status_code, 400, username)
            self.assertIn("reserved", response.get_json()["message"])
        self.assertEqual(len(list(self.db.collection("users").stream())), 2)

        for username in ("a.b", "__alice", "..."):
            response = client.post("/auth/session", data={"username": username})
            self.assertEqual(response.status_code, 200, username)

    def test_login_required(self):
        client = self.app.test_client()
        response = client.post("/group/", data={"name": "Friends"})
        self.assertEqual(response.status_code, 401)

    def test_create_and_view_group(self):
        group_id = self._create_group()
        body = self.alice.get(f"/group/{group_id}").get_json()
        self.assertTrue(body["success"])
        self.assertTrue(body["data"]["is_admin"])
        self.assertEqual(body["data"]["member_count"], 1)
        self.assertEqual(body["data"]["recent_groups"][0]["id"], group_id)

    def test_view_unknown_group(self):
        response = self.alice.get("/group/missing")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json()["message"], "Group not found.")

    def test_join_twice_lands_on_group(self):
        group_id = self._create_group()
        self.assertEqual(self.bob.post(f"/group/{group_id}/join").status_code, 200)
        response = self.bob.post(f"/group/{group_id}/join")
        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertEqual(body["message"], "You are already a member of this group.")
        self.assertEqual(body["data"]["member_count"], 2)

    def test_join_locked_group(self):
        group_id = self._create_group()
        response = self.alice.post(f"/group/{group_id}/lock")
        self.assertTrue(response.get_json()["data"]["group"]["is_locked"])

        response = self.bob.post(f"/group/{group_id}/join")
        self.assertEqual(response.status_code, 423)

    def test_lock_requires_admin(self):
        group_id = self._create_group()
        self.bob.post(f"/group/{group_id}/join")
        response = self.bob.post(f"/group/{group_id}/lock")
        self.assertEqual(response.status_code, 403)

    def test_submit_requires_json_list(self):
        group_id = self._create_group()
        response = self.alice.post(
            f"/group/{group_id}/predictions", data={"predictions": "Rain"}
        )
        self.assertEqual(response.status_code, 400)

    def test_submit_quota(self):
        group_id = self._create_group()
        self.bob.post(f"/group/{group_id}/join")
        response = self.alice.post(
            f"/group/{group_id}/predictions",
            json={"predictions": [str(i) for i in range(6)]},
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("5 predictions", response.get_json()["message"])

    def test_full_game(self):
        group_id = self._create_group()
        response = self._start_play(group_id)
        body = response.get_json()
        self.assertEqual(body["message"], "Everyone has submitted. Let's play bingo!")
        self.assertEqual(body["data"]["group"]["status"], "active")

        carol = self._client("carol")
        self.assertEqual(carol.post(f"/group/{group_id}/join").status_code, 409)

        card = self.alice.get(f"/group/{group_id}/card").get_json()["data"]
        self.assertEqual(len(card["cells"]), 25)
        self.assertEqual(card["cells"][12]["kind"], "free")
        snow = next(c for c in card["cells"] if c["content"] == "Snow")

        response = self.alice.post(
            f"/group/{group_id}/card/{snow['prediction_id']}/toggle"
        )
        self.assertEqual(response.get_json()["data"]["completed"], True)

        card = self.bob.get(f"/group/{group_id}/card").get_json()["data"]
        self.assertEqual(card["completed_count"], 1)

        response = self.bob.post(f"/group/{group_id}/card/FREE/toggle")
        self.assertEqual(response.status_code, 400)

    def test_card_before_play(self):
        group_id = self._create_group()
        response = self.alice.get(f"/group/{group_id}/card")
        self.assertEqual(response.status_code, 409)

    def test_seeded_layout(self):
        self.app.config["BINGO_SEED_LAYOUT"] = True
        group_id = self._create_group()
        self._start_play(group_id)
        first = self.alice.get(f"/group/{group_id}/card").get_json()["data"]["cells"]
        second = self.bob.get(f"/group/{group_id}/card").get_json()["data"]["cells"]
        self.assertEqual(first, second)

    def test_review_flow(self):
        group_id = self._create_group()
        self.bob.post(f"/group/{group_id}/join")
        self.bob.post(f"/group/{group_id}/predictions", json={"predictions": ["Snow"]})

        response = self.bob.post(f"/group/{group_id}/phase", data={"status": "review"})
        self.assertEqual(response.status_code, 403)
        response = self.alice.post(
            f"/group/{group_id}/phase", data={"status": "review"}
        )
        self.assertEqual(response.get_json()["data"]["group"]["status"], "review")

        predictions = self.bob.get(f"/group/{group_id}/predictions/review").get_json()
        prediction_id = predictions["data"]["predictions"][0]["id"]

        response = self.bob.post(
            f"/group/{group_id}/predictions/{prediction_id}/comments",
            data={"content": "Bold call"},
        )
        self.assertEqual(response.status_code, 201)

        response = self.alice.post(
            f"/group/{group_id}/predictions/{prediction_id}/review",
            data={"status": "approved"},
        )
        prediction = response.get_json()["data"]["prediction"]
        self.assertEqual(prediction["status"], "approved")

        response = self.alice.post(
            f"/group/{group_id}/phase", data={"status": "active"}
        )
        self.assertEqual(response.get_json()["data"]["group"]["status"], "active")

        response = self.alice.post(
            f"/group/{group_id}/phase", data={"status": "submission"}
        )
        self.assertEqual(response.status_code, 409)


if __name__ == "__main__":
    unittest.main()
