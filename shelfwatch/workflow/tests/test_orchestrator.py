from datetime import date, datetime, timedelta, timezone

import pytest

from shelfwatch.config import AppConfig
from shelfwatch.data.backends.csv_backend import CsvInventoryStore
from shelfwatch.data.models import (
    ConversationSession,
    ExistingSupplier,
    OrderRecommendation,
    ProcurementAnalysis,
    SupplierCandidate,
    SupplierProduct,
    SupplierRecommendations,
    TranscriptMessage,
)
from shelfwatch.errors import CollaboratorError, ItemNotFoundError
from shelfwatch.services.cache import SupplierSearchCache
from shelfwatch.workflow.orchestrator import WorkflowOrchestrator, resolve_supplier_id

NOW = datetime(2024, 10, 8, 9, 0, tzinfo=timezone.utc)


class FakeVision:
    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = []

    def describe_image(self, image, filename="inventory.jpg"):
        self.calls.append(filename)
        if self.error:
            raise self.error
        return self.text


class FakeSupplierSearch:
    def __init__(self, candidates=None):
        self.candidates = candidates if candidates is not None else [
            SupplierCandidate(name="Lone Star Supply", contact_phone="512-555-0199", estimated_price=6.95),
            SupplierCandidate(name="Quiet Co"),
        ]
        self.calls = []

    def search(self, item_name, max_results=5, location=None):
        self.calls.append((item_name, max_results, location))
        return list(self.candidates)


class FakeReasoning:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def analyze(self, context, existing_suppliers, new_suppliers):
        self.calls.append((context, existing_suppliers, new_suppliers))
        if self.error:
            raise self.error
        return ProcurementAnalysis(
            supplier_recommendations=SupplierRecommendations(),
            order_recommendation=OrderRecommendation(
                item_name=context.item_name,
                recommended_quantity=40,
                recommended_supplier="austin wholesale",
                supplier_id="made-up-id",
                unit_price=7.5,
                total_cost=300.0,
                lead_time_days=2,
                reasoning="Cheapest known supplier.",
            ),
            full_reasoning="Stock runs out within the week.",
        )


class FakeConversation:
    def __init__(self):
        self.calls = []

    def start_session(self, recommendation_text):
        self.calls.append(recommendation_text)
        return ConversationSession(session_id="sess-1", transcript=[
            TranscriptMessage(role="agent", content=recommendation_text),
            TranscriptMessage(role="user", content="Approved."),
        ])


class RecordingNotifier:
    def __init__(self):
        self.messages = []

    def notify(self, title, description, variant="default"):
        self.messages.append((title, variant))


@pytest.fixture
def store(tmp_path):
    store = CsvInventoryStore(tmp_path)
    store.add_supplier(ExistingSupplier(
        supplier_id="s1",
        name="Austin Wholesale",
        contact_email="orders@austin.example",
        products=[SupplierProduct(product_name="Cement Bags", unit_price=7.5, lead_time_days=2)],
    ))
    return store


@pytest.fixture
def fakes():
    return {
        "vision": FakeVision(),
        "supplier_search": FakeSupplierSearch(),
        "reasoning": FakeReasoning(),
        "conversation": FakeConversation(),
        "notifier": RecordingNotifier(),
    }


@pytest.fixture
def orchestrator(store, fakes):
    return WorkflowOrchestrator(
        store,
        config=AppConfig(supplier_search_max_results=3, supplier_search_location="Austin, TX"),
        supplier_cache=SupplierSearchCache(ttl_seconds=3600),
        clock=lambda: NOW,
        **fakes,
    )


def seed_cement(orchestrator):
    for days_ago, qty in [(10, 120), (6, 100), (3, 80), (0, 60)]:
        orchestrator.log_stock_count("u1", "Cement Bags", qty, observed_at=NOW - timedelta(days=days_ago))


# ---- log_stock_count ----

def test_log_stock_count_appends_observation(orchestrator, store):
    observation = orchestrator.log_stock_count("u1", "  Dish Soap ", 12)
    assert observation.item_name == "Dish Soap"
    assert observation.observed_at == NOW
    assert [o.quantity for o in store.get_observations("u1", "Dish Soap")] == [12]


@pytest.mark.parametrize("name,qty", [("", 5), ("   ", 5), ("Dish Soap", -1)])
def test_log_stock_count_rejects_bad_input(orchestrator, store, name, qty):
    with pytest.raises(ValueError):
        orchestrator.log_stock_count("u1", name, qty)
    assert store.list_items("u1") == []


# ---- supplier workflow ----

def test_supplier_workflow_runs_every_step(orchestrator, store, fakes):
    seed_cement(orchestrator)
    result = orchestrator.execute_supplier_search_workflow("u1", "Cement Bags")

    assert fakes["supplier_search"].calls == [("Cement Bags", 3, "Austin, TX")]

    context, existing, options = fakes["reasoning"].calls[0]
    assert context.current_quantity == 60
    assert context.estimated_daily_usage == 6.0
    assert context.days_until_stock_out == 10
    assert [s.supplier_id for s in existing] == ["s1"]
    assert [(o.name, o.contact) for o in options] == [("Lone Star Supply", "512-555-0199"), ("Quiet Co", "N/A")]

    order = store.get_order(result.order_id)
    assert order.status == "draft"
    assert order.supplier_id == "s1"
    assert order.items[0].quantity == 40
    assert order.expected_delivery_date == date(2024, 10, 10)
    assert order.notes == "Cheapest known supplier."

    conversation = store.get_conversation(result.conversation_id)
    assert conversation.session_id == result.session_id == "sess-1"
    assert conversation.order_id == result.order_id
    assert conversation.transcript[1].content == "Approved."
    assert conversation.agent_reasoning == "Stock runs out within the week."
    assert conversation.recommendations["order_recommendation"]["recommended_quantity"] == 40

    summary = fakes["conversation"].calls[0]
    assert "I suggest ordering 40 units of Cement Bags" in summary
    assert ("Draft order ready", "default") in fakes["notifier"].messages
    assert result.recommendation.total_cost == 300.0


def test_supplier_search_is_cached_between_runs(orchestrator, fakes):
    seed_cement(orchestrator)
    orchestrator.execute_supplier_search_workflow("u1", "Cement Bags")
    orchestrator.execute_supplier_search_workflow("u1", "Cement Bags")
    assert len(fakes["supplier_search"].calls) == 1
    assert len(fakes["reasoning"].calls) == 2


def test_reasoning_failure_stops_the_pipeline(orchestrator, fakes, tmp_path):
    seed_cement(orchestrator)
    fakes["reasoning"].error = CollaboratorError("reasoning", "HTTP 503 Service Unavailable")

    with pytest.raises(CollaboratorError, match="503"):
        orchestrator.execute_supplier_search_workflow("u1", "Cement Bags")

    assert fakes["conversation"].calls == []
    assert not (tmp_path / "orders.csv").exists()
    assert not (tmp_path / "conversations.csv").exists()


def test_unknown_item_is_not_found(orchestrator, fakes):
    with pytest.raises(ItemNotFoundError):
        orchestrator.execute_supplier_search_workflow("u1", "Nothing")
    assert fakes["supplier_search"].calls == []


def test_explicit_lead_time_feeds_reorder_levels(orchestrator, fakes):
    seed_cement(orchestrator)
    orchestrator.execute_supplier_search_workflow("u1", "Cement Bags", lead_time_days=7)
    short_context = fakes["reasoning"].calls[0][0]
    orchestrator.execute_supplier_search_workflow("u1", "Cement Bags", lead_time_days=1)
    assert fakes["reasoning"].calls[1][0].reorder_level < short_context.reorder_level


# ---- inventory workflow ----

def test_inventory_workflow_counts_alerts_and_reorders(orchestrator, store, fakes):
    for days_ago, qty in [(6, 100), (3, 100)]:
        orchestrator.log_stock_count("u1", "Cement Bags", qty, observed_at=NOW - timedelta(days=days_ago))
    fakes["vision"].text = "Cement Bags: 40\n2x Dish Soap\nblurry shelf edge"

    result = orchestrator.execute_inventory_workflow("u1", b"jpeg-bytes", "shelf.jpg")

    assert [(i.name, i.quantity) for i in result.items] == [("Cement Bags", 40), ("Dish Soap", 2)]
    assert result.photo_id is not None
    assert [o.quantity for o in store.get_observations("u1", "Cement Bags")] == [100, 100, 40]
    assert [o.quantity for o in store.get_observations("u1", "Dish Soap")] == [2]

    assert [(a.item_name, a.average_previous, a.decline_percentage) for a in result.alerts] == [
        ("Cement Bags", 80.0, 50)
    ]
    assert ("Stock alert: Cement Bags", "destructive") in fakes["notifier"].messages

    assert [t.item_name for t in result.analysis.critical_items] == ["Cement Bags"]
    assert result.reorder is not None
    assert store.get_order(result.reorder.order_id).photo_id == result.photo_id


def test_inventory_workflow_without_reorder(orchestrator, fakes):
    fakes["vision"].text = "5 Sponges"
    result = orchestrator.execute_inventory_workflow("u1", b"jpeg-bytes")
    assert result.reorder is None
    assert result.alerts == []
    assert fakes["supplier_search"].calls == []


def test_inventory_workflow_with_nothing_detected(orchestrator, fakes, tmp_path):
    fakes["vision"].text = "I can't make out any products."
    result = orchestrator.execute_inventory_workflow("u1", b"jpeg-bytes")
    assert result.items == [] and result.photo_id is None and result.analysis is None
    assert not (tmp_path / "photos.csv").exists()
    assert fakes["notifier"].messages == [("No items detected", "default")]


def test_vision_failure_propagates(orchestrator, fakes, tmp_path):
    fakes["vision"].error = CollaboratorError("vision", "timed out after 60.0s")
    with pytest.raises(CollaboratorError):
        orchestrator.execute_inventory_workflow("u1", b"jpeg-bytes")
    assert not (tmp_path / "photos.csv").exists()


def test_second_photo_of_an_item_can_raise_alert(orchestrator, fakes):
    orchestrator.log_stock_count("u1", "Dish Soap", 100, observed_at=NOW - timedelta(days=1))
    fakes["vision"].text = "Dish Soap: 10"

    result = orchestrator.execute_inventory_workflow("u1", b"jpeg-bytes")

    assert [(a.average_previous, a.decline_percentage) for a in result.alerts] == [(55.0, 82)]
    assert ("Stock alert: Dish Soap", "destructive") in fakes["notifier"].messages


# ---- forecast ----

def test_forecast_uses_configured_horizon_and_window(store, fakes):
    def orchestrator_with(**settings):
        return WorkflowOrchestrator(store, config=AppConfig(**settings), clock=lambda: NOW, **fakes)

    seed_cement(orchestrator_with())

    month = orchestrator_with(reorder_window_days=30).forecast_item("u1", "Cement Bags")
    week = orchestrator_with(reorder_window_days=7).forecast_item("u1", "Cement Bags")

    assert len([p for p in month.data if not p.is_predicted]) == 4
    assert len([p for p in week.data if not p.is_predicted]) == 3
    # 6.0 units/day over 30 days, 6.7 over the last week
    assert month.reorder_levels.buffer_stock == 27
    assert week.reorder_levels.buffer_stock == 31


def test_forecast_horizon_without_reorder_trigger(store, fakes):
    orchestrator = WorkflowOrchestrator(store, config=AppConfig(forecast_days=5), clock=lambda: NOW, **fakes)
    orchestrator.log_stock_count("u1", "Rebar", 1000, observed_at=NOW - timedelta(days=10))
    orchestrator.log_stock_count("u1", "Rebar", 990)

    curve = orchestrator.forecast_item("u1", "Rebar")

    assert [p.quantity for p in curve.data if p.is_predicted] == [989, 988, 987, 986, 985]


def test_forecast_unknown_item(orchestrator):
    with pytest.raises(ItemNotFoundError):
        orchestrator.forecast_item("u1", "Nothing")


# ---- helpers ----

def test_resolve_supplier_id():
    existing = [ExistingSupplier(supplier_id="s1", name="Austin Wholesale")]
    rec = OrderRecommendation(
        item_name="x", recommended_quantity=1, recommended_supplier="Somebody New",
        supplier_id="s1", unit_price=1, total_cost=1,
    )
    assert resolve_supplier_id(rec, existing) == "s1"
    assert resolve_supplier_id(rec.model_copy(update={"supplier_id": None}), existing) is None
    assert resolve_supplier_id(rec.model_copy(update={"supplier_id": None}), []) is None
