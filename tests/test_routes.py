"""HTTP tests for studify.routers.roadmap through the ASGI app."""
import httpx
import pytest

from studify.core import limiter
from studify.dependencies import get_db, get_provider, get_session_factory
from studify.main import app
from studify.providers import GenerationTimeoutError, GenerationUpstreamError

USER = {"X-User-Id": "user-1"}


@pytest.fixture
def provider(provider_factory, plan_payload):
    return provider_factory(plan_payload)


@pytest.fixture
async def client(session_factory, provider):
    async def _get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_provider] = lambda: provider
    limiter.enabled = False
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


async def _create(client, **body) -> httpx.Response:
    payload = {"course": "Python Basics", "durationType": "recommended", "customDays": None}
    payload.update(body)
    return await client.post("/api/create-roadmap", json=payload, headers=USER)


async def test_health(client) -> None:
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


async def test_requires_user_header(client) -> None:
    r = await client.post("/api/create-roadmap", json={"course": "Python"})
    assert r.status_code == 401


@pytest.mark.parametrize(
    "body",
    [
        {"course": "   "},
        {"durationType": "custom", "customDays": None},
        {"durationType": "custom", "customDays": 0},
        {"durationType": "custom", "customDays": 1000},
        {"durationType": "forever"},
    ],
)
async def test_rejects_invalid_request(client, body) -> None:
    r = await _create(client, **body)
    assert r.status_code == 422


async def test_create_then_read_roadmap(client, provider) -> None:
    r = await _create(client, durationType="custom", customDays=14)
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["courseTitle"] == "Python Basics"
    assert body["processingTimeSeconds"] >= 0
    assert provider.calls == [("Python Basics", "custom", 14)]
    user_course_id = body["userCourseId"]

    r = await client.get(f"/api/roadmap/{user_course_id}", headers=USER)
    assert r.status_code == 200
    roadmap = r.json()
    assert roadmap["roadmap"]["courseTitle"] == "Python Basics"
    assert [p["dayNumber"] for p in roadmap["dailyPlans"]] == [1, 2, 3]
    assert roadmap["dailyPlans"][0]["tasks"][0]["estimatedTime"] == 60

    r = await client.get(f"/api/roadmap/{user_course_id}", headers={"X-User-Id": "intruder"})
    assert r.status_code == 404

    r = await client.get(f"/api/quiz/{user_course_id}/3", headers=USER)
    assert r.status_code == 200
    quiz = r.json()
    assert quiz["dayRange"] == "Days 1-2"
    assert quiz["questions"][0]["correctAnswer"] == 1

    r = await client.get(f"/api/quiz/{user_course_id}/1", headers=USER)
    assert r.status_code == 404

    r = await client.get("/api/my-roadmaps", headers=USER)
    assert r.status_code == 200
    items = r.json()["roadmaps"]
    assert [(i["userCourseId"], i["totalDays"], i["completedDays"]) for i in items] == [(user_course_id, 3, 0)]


@pytest.mark.parametrize(
    "error,status_code",
    [
        (GenerationTimeoutError("took too long"), 504),
        (GenerationUpstreamError(500, "AI service unavailable: returned 500."), 502),
    ],
)
async def test_service_errors_map_to_status(client, provider, error, status_code) -> None:
    provider.error = error
    r = await _create(client)
    assert r.status_code == status_code
    assert r.json()["detail"]["error"] == "Failed to create roadmap"

    r = await client.get("/api/my-roadmaps", headers=USER)
    assert r.json()["roadmaps"] == []


async def test_probe(client, provider) -> None:
    provider.payload = {"result": "pong"}
    r = await client.get("/api/test-generation")
    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "AI service is reachable", "status": 200, "hasResult": True}

    provider.error = GenerationTimeoutError("slow")
    r = await client.get("/api/test-generation")
    assert r.status_code == 503
