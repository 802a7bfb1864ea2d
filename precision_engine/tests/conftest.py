"""Shared document fixtures and a concurrency-observing checker."""

import threading
import time

import pytest
from precision_engine.config import Settings
from precision_engine.models.documents import (
    Capability,
    Enabler,
    FunctionalRequirement,
    NonFunctionalRequirement,
)


def _build_capability(**overrides) -> Capability:
    data = {
        "id": "CAP-0001",
        "title": "Subscription Management",
        "description": "Customers can view, upgrade and cancel their subscriptions from the self-service portal.",
        "status": "Draft",
        "priority": "High",
        "owner": "Billing Team",
    }
    data.update(overrides)
    return Capability(**data)


def _build_enabler(**overrides) -> Enabler:
    data = {
        "id": "ENB-0001",
        "title": "Renewal Reminder Service",
        "description": "Background service that emails customers before their subscription renews.",
        "status": "In Draft",
        "priority": "Medium",
        "owner": "Billing Team",
        "capability_id": "CAP-0001",
        "functional_requirements": [
            FunctionalRequirement(
                req_id="FR-001",
                requirement="The system shall send a reminder email seven days before renewal",
                description="Reminder",
                priority="High",
                status="In Draft",
            )
        ],
        "non_functional_requirements": [
            NonFunctionalRequirement(
                req_id="NFR-001",
                type="Performance",
                requirement="Reminder emails are delivered within 5 minutes of scheduling",
                priority="Medium",
                status="In Draft",
                test_approach="Load test with 10k scheduled reminders",
            )
        ],
        "implementation_plan": "Add a scheduled job to the billing worker.",
        "acceptance_criteria": "Reminders arrive seven days before renewal.",
    }
    data.update(overrides)
    return Enabler(**data)


@pytest.fixture
def capability() -> Capability:
    return _build_capability()


@pytest.fixture
def enabler() -> Enabler:
    return _build_enabler()


@pytest.fixture
def settings() -> Settings:
    return Settings(rules_file="", corpus_path="")


@pytest.fixture
def make_capability():
    return _build_capability


@pytest.fixture
def make_enabler():
    return _build_enabler


class InFlightTracker:
    """Slow checker that records how many copies of itself run at once."""

    def __init__(self, delay: float = 0.05):
        self.delay = delay
        self.current = 0
        self.peak = 0
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self, document, kind, corpus, catalog):
        with self._lock:
            self.calls += 1
            self.current += 1
            self.peak = max(self.peak, self.current)
        time.sleep(self.delay)
        with self._lock:
            self.current -= 1
        return []


@pytest.fixture
def make_tracker():
    return InFlightTracker
