"""Suno HTTP adapter tests."""

from __future__ import annotations

import json
import unittest

import httpx

from cliprelay.adapters.generation import ProviderUnavailableError, SunoGenerationProvider


def _provider(handler, *, api_key: str = "secret-key") -> SunoGenerationProvider:
    return SunoGenerationProvider(
        base_url="https://suno.example/",
        api_key=api_key,
        model="V5",
        transport=httpx.MockTransport(handler),
    )


class SunoGenerationProviderTests(unittest.IsolatedAsyncioTestCase):
    async def test_start_generation_posts_callback_mode_payload(self) -> None:
        captured: list[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={"code": 200, "data": {"taskId": "task-1"}})

        job_id = await _provider(_handler).start_generation(
            prompt="A hopeful anthem",
            instrumental=True,
            callback_url="https://relay.example/suno/callback",
        )

        self.assertEqual(job_id, "task-1")
        request = captured[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(request.url.path, "/api/v1/generate")
        self.assertEqual(request.headers["Authorization"], "Bearer secret-key")
        self.assertEqual(
            json.loads(request.content),
            {
                "prompt": "A hopeful anthem",
                "instrumental": True,
                "model": "V5",
                "customMode": False,
                "wait_audio": False,
                "callbackUrl": "https://relay.example/suno/callback",
            },
        )

    async def test_start_generation_accepts_top_level_task_id(self) -> None:
        provider = _provider(lambda request: httpx.Response(200, json={"taskId": "task-top"}))

        self.assertEqual(
            await provider.start_generation(prompt="p", instrumental=False, callback_url="https://cb"),
            "task-top",
        )

    async def test_start_generation_without_task_id_returns_none(self) -> None:
        provider = _provider(lambda request: httpx.Response(200, json={"code": 200, "data": {}}))

        self.assertIsNone(await provider.start_generation(prompt="p", instrumental=False, callback_url="https://cb"))

    async def test_fetch_clips_sends_batched_ids_and_reads_both_shapes(self) -> None:
        captured: list[httpx.Request] = []
        bodies = [
            [{"id": "a", "status": "complete"}, "garbage"],
            {"clips": [{"id": "b", "status": "queued"}]},
        ]

        def _handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json=bodies[len(captured) - 1])

        provider = _provider(_handler)
        first = await provider.fetch_clips(["a", "b"])
        second = await provider.fetch_clips(["b"])

        self.assertEqual(captured[0].url.path, "/api/v1/get")
        self.assertEqual(captured[0].url.params["ids"], "a,b")
        self.assertEqual(first, [{"id": "a", "status": "complete"}])
        self.assertEqual(second, [{"id": "b", "status": "queued"}])

    async def test_http_errors_and_bad_json_raise_provider_unavailable(self) -> None:
        handlers = {
            "server_error": lambda request: httpx.Response(503, json={"msg": "busy"}),
            "bad_json": lambda request: httpx.Response(200, content=b"<html>"),
            "network": self._raise_connect_error,
        }
        for name, handler in handlers.items():
            with self.subTest(case=name):
                with self.assertRaises(ProviderUnavailableError):
                    await _provider(handler).fetch_clips(["a"])

    async def test_missing_api_key_fails_before_any_request(self) -> None:
        calls: list[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={})

        with self.assertRaises(ProviderUnavailableError):
            await _provider(_handler, api_key="").start_generation(prompt="p", instrumental=False, callback_url="x")
        self.assertEqual(calls, [])

    @staticmethod
    def _raise_connect_error(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)
