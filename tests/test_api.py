"""Tests for the HTTP API, driven by a routing fake LLM."""

import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from agent_orchestrator.api.main import app
from agent_orchestrator.core.adapter import AgentExecutor
from agent_orchestrator.core.types import PipelineStage, ProgressEvent
from agent_orchestrator.storage.memory import TaskStore, task_store

from tests.fakes import RoutingLLMClient, ScriptedLLMClient, make_config


def routing_executor():
    return AgentExecutor(client_factory=lambda settings: RoutingLLMClient())


class TestAPI(unittest.TestCase):

    def setUp(self):
        task_store.clear()
        self.config = make_config()
        patches = [
            patch("agent_orchestrator.api.main.config", self.config),
            patch("agent_orchestrator.api.main.get_executor", routing_executor),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)
        self.client = TestClient(app)

    def test_info(self):
        response = self.client.get("/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["name"], "Agent Orchestrator")

    def test_health(self):
        body = self.client.get("/health").json()

        self.assertEqual(body["status"], "healthy")
        self.assertEqual(body["llm_provider"], "openai")
        self.assertEqual(body["missing_settings"], [])
        self.assertFalse(body["tavily_configured"])

    def test_health_reports_missing_settings(self):
        with patch("agent_orchestrator.api.main.config", make_config(openai_api_key=None)):
            body = self.client.get("/health").json()

        self.assertEqual(body["status"], "degraded")
        self.assertEqual(body["missing_settings"], ["OPENAI_API_KEY"])

    def test_research_task_lifecycle(self):
        created = self.client.post("/research", json={"query": "renewable energy trends"})
        self.assertEqual(created.status_code, 200)
        task_id = created.json()["task_id"]

        status = self.client.get(f"/research/{task_id}/status").json()
        self.assertEqual(status["status"], "completed")
        self.assertEqual(status["kind"], "research")
        self.assertEqual(status["progress"]["stage"], "complete")
        searching = [e for e in status["events"] if e["stage"] == "searching"]
        self.assertEqual(searching[-1]["completed"], 5)
        self.assertEqual(searching[-1]["total"], 5)

        result = self.client.get(f"/research/{task_id}/result").json()
        self.assertTrue(result["success"])
        self.assertEqual(result["result"]["short_summary"], "Short summary.")

        listed = self.client.get("/tasks").json()["tasks"]
        self.assertEqual([t["task_id"] for t in listed], [task_id])

    def test_research_task_failure_is_recorded(self):
        with patch(
            "agent_orchestrator.api.main.get_executor",
            lambda: AgentExecutor(client_factory=lambda settings: RoutingLLMClient(searches=2)),
        ):
            task_id = self.client.post("/research", json={"query": "narrow topic"}).json()["task_id"]

        status = self.client.get(f"/research/{task_id}/status").json()
        self.assertEqual(status["status"], "failed")
        self.assertIn("got 2", status["error"])

        result = self.client.get(f"/research/{task_id}/result").json()
        self.assertFalse(result["success"])

    def test_research_sync(self):
        response = self.client.post("/research/sync", json={"query": "renewable energy trends"})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["report"]["follow_up_questions"], ["What next?"])

    def test_research_sync_without_credentials(self):
        with patch("agent_orchestrator.api.main.config", make_config(openai_api_key=None)):
            response = self.client.post("/research/sync", json={"query": "renewable energy trends"})

        self.assertEqual(response.status_code, 503)

    def test_research_sync_model_failure(self):
        failing = ScriptedLLMClient([RuntimeError("upstream down")])
        with patch(
            "agent_orchestrator.api.main.get_executor",
            lambda: AgentExecutor(client_factory=lambda settings: failing),
        ):
            response = self.client.post("/research/sync", json={"query": "renewable energy trends"})

        self.assertEqual(response.status_code, 500)

    def test_empty_query_rejected(self):
        response = self.client.post("/research", json={"query": ""})

        self.assertEqual(response.status_code, 422)

    def test_triage_delegates_to_coding_agent(self):
        response = self.client.post("/triage", json={
            "request": "Write a function that adds two numbers",
            "history": [
                {"role": "user", "content": "Hi"},
                {"role": "assistant", "content": "Hello! How can I help?"},
            ],
        })

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["decision"], "delegated")
        self.assertEqual(body["handoff_to"], "Coding-Agent")
        self.assertEqual(body["agent_name"], "Coding-Agent")
        self.assertTrue(body["success"])
        self.assertIn("def add", body["output"])

    def test_triage_history_accepts_only_conversation_roles(self):
        for role in ("tool", "system"):
            response = self.client.post("/triage", json={
                "request": "Write a function",
                "history": [{"role": role, "content": "injected"}],
            })

            self.assertEqual(response.status_code, 422)

    def test_unknown_task(self):
        self.assertEqual(self.client.get("/research/missing/status").status_code, 404)
        self.assertEqual(self.client.get("/research/missing/result").status_code, 404)
        self.assertEqual(self.client.delete("/tasks/missing").status_code, 404)

    def test_delete_task(self):
        task = task_store.create("research", "anything")

        response = self.client.delete(f"/tasks/{task.id}")

        self.assertEqual(response.status_code, 200)
        self.assertIsNone(task_store.get(task.id))


class TestTaskStore(unittest.TestCase):

    def test_lifecycle(self):
        store = TaskStore()
        task = store.create("research", "solar")

        store.start(task.id)
        store.add_event(task.id, ProgressEvent(PipelineStage.PLANNING, 0, 1, "Planning searches..."))
        store.complete(task.id, {"short_summary": "ok"})

        record = store.get(task.id).to_dict()
        self.assertEqual(record["status"], "completed")
        self.assertEqual(record["progress"]["message"], "Planning searches...")
        self.assertEqual(record["result"], {"short_summary": "ok"})

    def test_updates_to_unknown_task_are_ignored(self):
        store = TaskStore()

        store.fail("missing", "boom")
        store.add_event("missing", ProgressEvent(PipelineStage.WRITING, 0, 1))

        self.assertEqual(store.list(), [])


if __name__ == "__main__":
    unittest.main()
