from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterator, List, Optional

from ..analysis import (
    analyze_stock_levels,
    calculate_reorder_levels,
    detect_stock_alerts,
    generate_predictive_curve,
    parse_inventory_items,
    predict_stock_out,
)
from ..analysis.stock_analyzer import rank_by_risk
from ..config import AppConfig, get_config
from ..data.interface import InventoryStore
from ..data.models import (
    DraftOrder,
    ExistingSupplier,
    InventoryContext,
    InventoryWorkflowResult,
    Observation,
    OrderLine,
    OrderRecommendation,
    PredictiveCurve,
    SupplierCandidate,
    SupplierWorkflowResult,
)
from ..logging import get_logger
from ..services.cache import SupplierSearchCache
from ..services.interface import (
    ConversationService,
    Notifier,
    ReasoningService,
    SupplierSearchService,
    VisionService,
)
from ..services.notifier import LogNotifier
from ..services.payloads import (
    generate_recommendation_summary,
    recommendation_payload,
    supplier_options,
)

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def resolve_supplier_id(
    recommendation: OrderRecommendation,
    existing_suppliers: List[ExistingSupplier],
) -> Optional[str]:
    """Only keep a supplier id that refers to a supplier we actually have on record."""
    known_ids = {s.supplier_id for s in existing_suppliers}
    if recommendation.supplier_id in known_ids:
        return recommendation.supplier_id
    name = recommendation.recommended_supplier.strip().lower()
    for supplier in existing_suppliers:
        if supplier.name.strip().lower() == name:
            return supplier.supplier_id
    return None


class WorkflowOrchestrator:
    """
    Sequences the collaborators into the user-facing pipelines:

    - log_stock_count: record one manual count.
    - forecast_item: historical counts plus the projected sawtooth curve.
    - execute_inventory_workflow: photo -> vision -> parsed counts -> alerts and
      trend analysis -> supplier workflow for the most at-risk item.
    - execute_supplier_search_workflow: prediction -> supplier search ->
      reasoning -> draft order -> conversation transcript.

    Steps run strictly in order with no retries. A failing step is logged and
    its exception re-raised to the caller.
    """

    def __init__(
        self,
        store: InventoryStore,
        vision: VisionService,
        supplier_search: SupplierSearchService,
        reasoning: ReasoningService,
        conversation: ConversationService,
        notifier: Optional[Notifier] = None,
        supplier_cache: Optional[SupplierSearchCache] = None,
        config: Optional[AppConfig] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.config = config or get_config()
        self.store = store
        self.vision = vision
        self.supplier_search = supplier_search
        self.reasoning = reasoning
        self.conversation = conversation
        self.notifier = notifier or LogNotifier()
        self.supplier_cache = supplier_cache or SupplierSearchCache(self.config.supplier_cache_ttl_seconds)
        self.clock = clock

    @contextmanager
    def _step(self, workflow: str, name: str) -> Iterator[None]:
        logger.info(f"[{workflow}] {name}")
        try:
            yield
        except Exception as e:
            logger.error(f"[{workflow}] {name} failed: {e}")
            raise

    # ---- manual counts ----

    def log_stock_count(
        self,
        user_id: str,
        item_name: str,
        quantity: int,
        source: str = "manual",
        observed_at: Optional[datetime] = None,
    ) -> Observation:
        """Record a single count without a photo."""
        name = item_name.strip() if item_name else ""
        if not name:
            raise ValueError("item_name must not be empty")
        if quantity < 0:
            raise ValueError(f"quantity must be >= 0, got {quantity}")

        item = self.store.upsert_item(user_id, name)
        placeholder = self.store.save_photo(
            user_id,
            storage_path=f"{source}-entry",
            description=f"{source.capitalize()} count: {name}",
            analysis_data={"source": source, "items": [{"name": name, "quantity": quantity}]},
        )
        observation = self.store.append_count(
            item.item_id,
            placeholder.photo_id,
            quantity,
            observed_at=observed_at or self.clock(),
        )
        logger.info(f"Logged {quantity} x {name} for user {user_id} ({source})")
        return observation

    def forecast_item(
        self,
        user_id: str,
        item_name: str,
        lead_time_days: Optional[int] = None,
    ) -> PredictiveCurve:
        """Chart data for one item: its recent counts plus `forecast_days` of projected stock."""
        lead_time = self.config.default_lead_time_days if lead_time_days is None else lead_time_days
        observations = self.store.get_observations(user_id, item_name)
        return generate_predictive_curve(
            observations,
            days_forward=self.config.forecast_days,
            lead_time_days=lead_time,
            now=self.clock(),
            window_days=self.config.reorder_window_days,
        )

    # ---- photo workflow ----

    def execute_inventory_workflow(
        self,
        user_id: str,
        image: bytes,
        filename: str = "inventory.jpg",
    ) -> InventoryWorkflowResult:
        wf = "inventory"
        now = self.clock()
        logger.info(f"[{wf}] Starting for user {user_id}")

        with self._step(wf, "Step 1: describing image"):
            raw_output = self.vision.describe_image(image, filename)

        items = parse_inventory_items(raw_output)
        if not items:
            logger.warning(f"[{wf}] No items detected in image")
            self.notifier.notify("No items detected", "Try another photo with the labels visible.")
            return InventoryWorkflowResult()
        logger.info(f"[{wf}] Detected {len(items)} items")

        with self._step(wf, "Step 2: saving inventory snapshot"):
            photo = self.store.save_photo(
                user_id,
                storage_path=f"{user_id}/{now:%Y%m%dT%H%M%S}_{filename}",
                description=f"AI analyzed - {len(items)} items detected",
                analysis_data={
                    "items": [item.model_dump() for item in items],
                    "total_items": len(items),
                    "raw_output": raw_output,
                    "timestamp": now.isoformat(),
                },
            )

        with self._step(wf, "Step 3: updating inventory counts"):
            for parsed in items:
                item = self.store.upsert_item(user_id, parsed.name)
                self.store.append_count(item.item_id, photo.photo_id, parsed.quantity, observed_at=now)

        observations = self.store.get_observations_by_item(user_id)
        alerts = detect_stock_alerts(items, observations, self.config.trend_window_days, now)
        for alert in alerts:
            self.notifier.notify(
                f"Stock alert: {alert.item_name}",
                f"Down {alert.decline_percentage}% to {alert.current_quantity} "
                f"(recent average {alert.average_previous:.1f})",
                variant="destructive",
            )

        with self._step(wf, "Step 4: analyzing stock trends"):
            analysis = analyze_stock_levels(observations, self.config.trend_window_days, now)

        needs_reorder = rank_by_risk(analysis.low_stock_items + analysis.critical_items)
        result = InventoryWorkflowResult(photo_id=photo.photo_id, items=items, alerts=alerts, analysis=analysis)
        if not needs_reorder:
            logger.info(f"[{wf}] No items need reordering")
            return result

        target = needs_reorder[0]
        logger.info(f"[{wf}] {len(needs_reorder)} items need reordering, starting with {target.item_name}")
        result.reorder = self.execute_supplier_search_workflow(user_id, target.item_name, photo_id=photo.photo_id)
        return result

    # ---- supplier workflow ----

    def _search_suppliers(self, item_name: str) -> List[SupplierCandidate]:
        cached = self.supplier_cache.get(item_name)
        if cached is not None:
            logger.debug(f"Supplier cache hit for {item_name}")
            return cached
        candidates = self.supplier_search.search(
            item_name,
            max_results=self.config.supplier_search_max_results,
            location=self.config.supplier_search_location,
        )
        self.supplier_cache.set(item_name, candidates)
        return candidates

    def execute_supplier_search_workflow(
        self,
        user_id: str,
        item_name: str,
        lead_time_days: Optional[int] = None,
        photo_id: Optional[str] = None,
    ) -> SupplierWorkflowResult:
        wf = "supplier"
        now = self.clock()
        lead_time = self.config.default_lead_time_days if lead_time_days is None else lead_time_days
        logger.info(f"[{wf}] Starting for {item_name} (user {user_id})")

        with self._step(wf, "Step 1: predicting stock-out"):
            observations = self.store.get_observations(user_id, item_name)
            prediction = predict_stock_out(observations, self.config.stock_out_window_days, now)
            levels = calculate_reorder_levels(observations, lead_time, now, self.config.reorder_window_days)
            context = InventoryContext(
                item_name=item_name,
                current_quantity=observations[-1].quantity if observations else 0,
                reorder_level=levels.reorder_level,
                minimum_stock=levels.minimum_stock,
                days_until_stock_out=prediction.days_until_stock_out if prediction else None,
                estimated_daily_usage=prediction.estimated_daily_usage if prediction else 0.0,
            )

        with self._step(wf, "Step 2: searching suppliers"):
            candidates = self._search_suppliers(item_name)

        with self._step(wf, "Step 3: loading existing suppliers"):
            existing = self.store.list_suppliers(item_name)

        with self._step(wf, "Step 4: reasoning over supplier options"):
            analysis = self.reasoning.analyze(context, existing, supplier_options(candidates))
        recommendation = analysis.order_recommendation

        with self._step(wf, "Step 5: creating draft order"):
            order = self.store.create_draft_order(DraftOrder(
                user_id=user_id,
                photo_id=photo_id,
                supplier_id=resolve_supplier_id(recommendation, existing),
                supplier_name=recommendation.recommended_supplier,
                items=[OrderLine(
                    item_name=recommendation.item_name,
                    quantity=recommendation.recommended_quantity,
                    unit_price=recommendation.unit_price,
                )],
                total_cost=recommendation.total_cost,
                currency=recommendation.currency,
                notes=recommendation.reasoning or None,
                expected_delivery_date=now.date() + timedelta(days=recommendation.lead_time_days),
            ))

        with self._step(wf, "Step 6: starting conversation"):
            session = self.conversation.start_session(generate_recommendation_summary(analysis))

        with self._step(wf, "Step 7: storing conversation"):
            conversation = self.store.save_conversation(
                user_id,
                session,
                order_id=order.order_id,
                photo_id=photo_id,
                agent_reasoning=analysis.full_reasoning or None,
                recommendations=recommendation_payload(analysis),
            )

        self.notifier.notify(
            "Draft order ready",
            f"{recommendation.recommended_quantity} x {recommendation.item_name} from "
            f"{recommendation.recommended_supplier} awaiting approval",
        )
        logger.info(f"[{wf}] Completed: order {order.order_id}, conversation {conversation.conversation_id}")
        return SupplierWorkflowResult(
            order_id=order.order_id,
            session_id=session.session_id,
            conversation_id=conversation.conversation_id,
            recommendation=recommendation,
        )
