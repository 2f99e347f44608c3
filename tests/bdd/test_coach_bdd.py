from __future__ import annotations

import json

import pytest
from coach.config import CoachSettings
from coach.main import create_app
from coach.prompt import GenerationRequest
from fastapi.testclient import TestClient
from pytest_bdd import given, parsers, scenario, then, when

pytestmark = pytest.mark.bdd

SECTIONS = [
    "summary",
    "urgent_actions",
    "next_7_days_plan",
    "follow_ups",
    "recruiter_questions",
    "strategy_insights",
    "interview_prep",
    "risk_flags",
]
PROSE = "Here are some thoughts on your search, in no particular format."


class StubGenerator:
    def __init__(self) -> None:
        self.output_text = json.dumps(
            {section: "" if section == "summary" else [] for section in SECTIONS}
        )
        self.requests: list[GenerationRequest] = []

    async def generate(self, request: GenerationRequest) -> str:
        self.requests.append(request)
        return self.output_text


@scenario("features/coach.feature", "Recommend next steps for a tracked application")
def test_recommend_next_steps() -> None:
    pass


@scenario("features/coach.feature", "Reject a body that is not JSON")
def test_reject_non_json_body() -> None:
    pass


@scenario("features/coach.feature", "Surface model output that is not JSON")
def test_surface_non_json_output() -> None:
    pass


@pytest.fixture
def context() -> dict[str, object]:
    return {"generator": StubGenerator()}


@given("a tracker export with one high-priority submitted application")
def given_tracker_export(context: dict[str, object]) -> None:
    context["body"] = json.dumps(
        {
            "data": {
                "applications": [
                    {"Company Name": "Acme", "Status": "Submitted", "Priority": "High"}
                ]
            }
        }
    ).encode()


@given("a request body that is not JSON")
def given_non_json_body(context: dict[str, object]) -> None:
    context["body"] = b"company=Acme&status=Submitted"


@given("the generation service answers with prose")
def given_prose_answer(context: dict[str, object]) -> None:
    context["generator"].output_text = PROSE


@when("recommendations are requested from the coach API", target_fixture="response")
def when_recommendations_are_requested(context: dict[str, object]):
    app = create_app(
        settings=CoachSettings(openai_api_key="sk-test"),
        generator=context["generator"],
    )
    with TestClient(app) as client:
        return client.post("/api/recommendations", content=context["body"])


@then("the coach response is successful")
def then_response_is_successful(response) -> None:
    assert response.status_code == 200


@then(parsers.parse("the coach responds with status {status:d}"))
def then_status_matches(response, status: int) -> None:
    assert response.status_code == status


@then("the response contains every recommendation section")
def then_every_section_present(response) -> None:
    assert sorted(response.json()) == sorted(SECTIONS)


@then(parsers.parse('the generation service saw company "{company}" with status "{status}"'))
def then_generation_saw_application(context: dict[str, object], company: str, status: str) -> None:
    applications = context["generator"].requests[0].payload.applications
    assert [(item.company, item.status) for item in applications] == [(company, status)]


@then("the generation service was not called")
def then_generation_not_called(context: dict[str, object]) -> None:
    assert context["generator"].requests == []


@then("the error envelope includes the raw model text")
def then_raw_text_included(response) -> None:
    assert response.json() == {"error": "Model returned non-JSON output.", "raw": PROSE}
