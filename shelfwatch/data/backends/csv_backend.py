from __future__ import annotations

import json
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from ...config import get_config
from ...errors import ItemNotFoundError
from ...logging import get_logger
from ..interface import InventoryStore
from ..models import (
    AgentConversation,
    ConversationSession,
    DraftOrder,
    ExistingSupplier,
    InventoryItem,
    InventoryPhoto,
    Observation,
    OrderRecord,
    SupplierProduct,
    as_utc,
)

logger = get_logger(__name__)

# Column layout per CSV file. Nested values are stored as JSON strings.
TABLE_COLUMNS: Dict[str, List[str]] = {
    "items": ["item_id", "user_id", "item_name", "created_at"],
    "photos": ["photo_id", "user_id", "storage_path", "description", "analysis_data", "created_at"],
    "counts": ["count_id", "item_id", "photo_id", "quantity", "confidence_score", "created_at"],
    "suppliers": ["supplier_id", "name", "contact_phone", "contact_email", "location"],
    "supplier_products": [
        "supplier_id", "product_name", "unit_price", "currency", "min_order_quantity", "lead_time_days",
    ],
    "orders": [
        "order_id", "user_id", "photo_id", "supplier_id", "supplier_name", "items", "status",
        "total_cost", "currency", "notes", "approval_required", "expected_delivery_date", "created_at",
    ],
    "conversations": [
        "conversation_id", "user_id", "order_id", "photo_id", "session_id", "transcript",
        "agent_reasoning", "recommendations", "status", "created_at",
    ],
}


@dataclass
class _Tables:
    items: pd.DataFrame
    photos: pd.DataFrame
    counts: pd.DataFrame
    suppliers: pd.DataFrame
    supplier_products: pd.DataFrame
    orders: pd.DataFrame
    conversations: pd.DataFrame


def _blank_to_none(value: Any) -> Any:
    if value is None or (isinstance(value, str) and value == ""):
        return None
    return value


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def resolve_data_dir(data_dir: str | Path) -> Path:
    """Anchor a relative data directory at the repository root when one can be found."""
    data_dir = Path(data_dir)
    if data_dir.is_absolute():
        return data_dir
    current = Path.cwd()
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            return parent / data_dir
    return current / data_dir


class CsvInventoryStore(InventoryStore):
    """
    CSV-backed implementation.
    - Loads every CSV under `data_dir` once at construction (missing files start empty).
    - Every mutation updates the in-memory frame and rewrites that one CSV.
    - Values are held as strings; pydantic coerces them on the way out.
    """

    def __init__(self, data_dir: str | Path = None) -> None:
        if data_dir is None:
            config = get_config()
            data_dir = config.data_dir

        self.data_dir = resolve_data_dir(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()
        self._tables = self._load_tables(self.data_dir)
        logger.info(f"CSV inventory store ready at {self.data_dir}")

    # ---------- loading / writing helpers ----------

    @staticmethod
    def _load_tables(data_dir: Path) -> _Tables:
        frames = {}
        for table, columns in TABLE_COLUMNS.items():
            path = data_dir / f"{table}.csv"
            if not path.exists():
                frames[table] = pd.DataFrame(columns=columns, dtype=str)
                continue
            try:
                df = pd.read_csv(path, dtype=str, keep_default_na=False)
            except Exception as e:
                raise RuntimeError(
                    f"Error reading {path}: {e}\n"
                    f"Please check that the CSV file is valid and readable."
                ) from e
            missing = [c for c in columns if c not in df.columns]
            if missing:
                raise RuntimeError(f"{path} is missing columns: {', '.join(missing)}")
            frames[table] = df[columns].copy()
        return _Tables(**frames)

    def _append_row(self, table: str, row: Dict[str, Any]) -> None:
        record = {}
        for col in TABLE_COLUMNS[table]:
            value = row.get(col)
            if value is None:
                record[col] = ""
            elif isinstance(value, (dict, list)):
                record[col] = json.dumps(value)
            elif isinstance(value, datetime):
                record[col] = as_utc(value).isoformat()
            else:
                record[col] = str(value)
        df = getattr(self._tables, table)
        df = pd.concat([df, pd.DataFrame([record], columns=TABLE_COLUMNS[table])], ignore_index=True)
        setattr(self._tables, table, df)
        df.to_csv(self.data_dir / f"{table}.csv", index=False)

    # ---------- row -> model ----------

    @staticmethod
    def _item_from_row(row: pd.Series) -> InventoryItem:
        return InventoryItem(
            item_id=row["item_id"],
            user_id=row["user_id"],
            item_name=row["item_name"],
            created_at=row["created_at"],
        )

    def _find_item(self, user_id: str, item_name: str) -> Optional[pd.Series]:
        df = self._tables.items
        match = df[(df["user_id"] == user_id) & (df["item_name"] == item_name)]
        if match.empty:
            return None
        return match.iloc[0]

    def _counts_for(self, item_ids: List[str], since: Optional[datetime]) -> pd.DataFrame:
        df = self._tables.counts
        df = df[df["item_id"].isin(item_ids)].copy()
        df["created_at"] = pd.to_datetime(df["created_at"], utc=True, format="ISO8601")
        if since is not None:
            df = df[df["created_at"] >= pd.Timestamp(as_utc(since))]
        return df.sort_values("created_at", kind="stable")

    # ---------- interface implementation ----------

    def upsert_item(self, user_id: str, item_name: str) -> InventoryItem:
        with self._lock:
            existing = self._find_item(user_id, item_name)
            if existing is not None:
                return self._item_from_row(existing)
            item = InventoryItem(
                item_id=_new_id(),
                user_id=user_id,
                item_name=item_name,
                created_at=_utcnow(),
            )
            self._append_row("items", item.model_dump())
            logger.debug(f"Created item {item.item_id} ({item_name}) for user {user_id}")
            return item

    def list_items(self, user_id: str) -> List[InventoryItem]:
        df = self._tables.items
        df = df[df["user_id"] == user_id]
        return [self._item_from_row(row) for _, row in df.iterrows()]

    def save_photo(
        self,
        user_id: str,
        storage_path: str,
        description: Optional[str] = None,
        analysis_data: Optional[Dict[str, Any]] = None,
    ) -> InventoryPhoto:
        with self._lock:
            photo = InventoryPhoto(
                photo_id=_new_id(),
                user_id=user_id,
                storage_path=storage_path,
                description=description,
                analysis_data=analysis_data or {},
                created_at=_utcnow(),
            )
            self._append_row("photos", photo.model_dump())
            return photo

    def append_count(
        self,
        item_id: str,
        photo_id: str,
        quantity: int,
        confidence_score: float = 1.0,
        observed_at: Optional[datetime] = None,
    ) -> Observation:
        with self._lock:
            items = self._tables.items
            match = items[items["item_id"] == item_id]
            if match.empty:
                raise ItemNotFoundError(item_id)
            observed_at = as_utc(observed_at) if observed_at is not None else _utcnow()
            observation = Observation(
                item_name=match.iloc[0]["item_name"],
                quantity=quantity,
                observed_at=observed_at,
            )
            self._append_row("counts", {
                "count_id": _new_id(),
                "item_id": item_id,
                "photo_id": photo_id,
                "quantity": quantity,
                "confidence_score": confidence_score,
                "created_at": observed_at,
            })
            return observation

    def get_observations(
        self,
        user_id: str,
        item_name: str,
        since: Optional[datetime] = None,
    ) -> List[Observation]:
        item = self._find_item(user_id, item_name)
        if item is None:
            raise ItemNotFoundError(item_name, user_id)
        counts = self._counts_for([item["item_id"]], since)
        return [
            Observation(item_name=item_name, quantity=int(row["quantity"]), observed_at=row["created_at"].to_pydatetime())
            for _, row in counts.iterrows()
        ]

    def get_observations_by_item(
        self,
        user_id: str,
        since: Optional[datetime] = None,
    ) -> Dict[str, List[Observation]]:
        items = self._tables.items
        items = items[items["user_id"] == user_id]
        names_by_id = dict(zip(items["item_id"], items["item_name"]))
        result: Dict[str, List[Observation]] = {name: [] for name in names_by_id.values()}
        counts = self._counts_for(list(names_by_id.keys()), since)
        for _, row in counts.iterrows():
            name = names_by_id[row["item_id"]]
            result[name].append(Observation(
                item_name=name,
                quantity=int(row["quantity"]),
                observed_at=row["created_at"].to_pydatetime(),
            ))
        return result

    def list_suppliers(self, product_name: Optional[str] = None) -> List[ExistingSupplier]:
        products = self._tables.supplier_products
        if product_name and product_name.strip():
            s = product_name.strip().lower()
            products = products[products["product_name"].str.lower().str.contains(s, regex=False, na=False)]

        suppliers = self._tables.suppliers
        if product_name and product_name.strip():
            suppliers = suppliers[suppliers["supplier_id"].isin(products["supplier_id"])]

        result = []
        for _, row in suppliers.iterrows():
            offered = products[products["supplier_id"] == row["supplier_id"]]
            result.append(ExistingSupplier(
                supplier_id=row["supplier_id"],
                name=row["name"],
                contact_phone=_blank_to_none(row["contact_phone"]),
                contact_email=_blank_to_none(row["contact_email"]),
                location=_blank_to_none(row["location"]),
                products=[
                    SupplierProduct(
                        product_name=p["product_name"],
                        unit_price=float(p["unit_price"] or 0),
                        currency=p["currency"] or "USD",
                        min_order_quantity=int(p["min_order_quantity"] or 1),
                        lead_time_days=int(p["lead_time_days"] or 1),
                    )
                    for _, p in offered.iterrows()
                ],
            ))
        return result

    def add_supplier(self, supplier: ExistingSupplier) -> ExistingSupplier:
        """Record a supplier and its products (used by seeding and tests)."""
        with self._lock:
            self._append_row("suppliers", supplier.model_dump(exclude={"products"}))
            for product in supplier.products:
                self._append_row("supplier_products", {"supplier_id": supplier.supplier_id, **product.model_dump()})
            return supplier

    def create_draft_order(self, order: DraftOrder) -> OrderRecord:
        with self._lock:
            record = OrderRecord(order_id=_new_id(), created_at=_utcnow(), **order.model_dump())
            self._append_row("orders", record.model_dump(mode="json"))
            logger.info(f"Draft order {record.order_id} saved for user {order.user_id}")
            return record

    def get_order(self, order_id: str) -> Optional[OrderRecord]:
        df = self._tables.orders
        match = df[df["order_id"] == order_id]
        if match.empty:
            return None
        row = {k: _blank_to_none(v) for k, v in match.iloc[0].to_dict().items()}
        row["items"] = json.loads(row["items"] or "[]")
        return OrderRecord(**row)

    def save_conversation(
        self,
        user_id: str,
        session: ConversationSession,
        order_id: Optional[str] = None,
        photo_id: Optional[str] = None,
        agent_reasoning: Optional[str] = None,
        recommendations: Optional[Dict[str, Any]] = None,
    ) -> AgentConversation:
        with self._lock:
            conversation = AgentConversation(
                conversation_id=_new_id(),
                user_id=user_id,
                order_id=order_id,
                photo_id=photo_id,
                session_id=session.session_id,
                transcript=session.transcript,
                agent_reasoning=agent_reasoning,
                recommendations=recommendations or {},
                created_at=_utcnow(),
            )
            self._append_row("conversations", conversation.model_dump(mode="json"))
            return conversation

    def get_conversation(self, conversation_id: str) -> Optional[AgentConversation]:
        df = self._tables.conversations
        match = df[df["conversation_id"] == conversation_id]
        if match.empty:
            return None
        row = {k: _blank_to_none(v) for k, v in match.iloc[0].to_dict().items()}
        row["transcript"] = json.loads(row["transcript"] or "[]")
        row["recommendations"] = json.loads(row["recommendations"] or "{}")
        return AgentConversation(**row)
