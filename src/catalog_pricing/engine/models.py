"""
Data models for the pricing engine.

Uses dataclasses for structured, type-safe data representation.
Loosely-typed rows (CSV, dicts from the data layer) are converted with the
``from_record`` constructors, which are the only place input is validated.
"""
import math
from dataclasses import dataclass, field, replace
from typing import Any, Optional


RETAIL_ONLY = "retail_only"
WHOLESALE_ONLY = "wholesale_only"
SIMPLE_WHOLESALE = "simple_wholesale"
GRADUAL_WHOLESALE = "gradual_wholesale"

PRICE_MODELS = (RETAIL_ONLY, WHOLESALE_ONLY, SIMPLE_WHOLESALE, GRADUAL_WHOLESALE)
WHOLESALE_MODELS = (WHOLESALE_ONLY, SIMPLE_WHOLESALE, GRADUAL_WHOLESALE)

RETAIL_TIER_NAME = "Varejo"
SIMPLE_WHOLESALE_TIER_NAME = "Atacado Simples"
DEFAULT_WHOLESALE_NAME = "Atacado"
DEFAULT_MINIMUM_PURCHASE_MESSAGE = "Pedido mínimo de {amount} para finalizar a compra"


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() in ('', 'nan', 'None', 'null')


def parse_bool(value: Any, default: bool = False) -> bool:
    """Parse a boolean from a CSV/DB value."""
    if _is_missing(value):
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('true', '1', 'yes', 'on')


def parse_optional_int(value: Any) -> Optional[int]:
    """Parse optional integer (empty = None)."""
    if _is_missing(value):
        return None
    return int(float(value))


def parse_optional_float(value: Any) -> Optional[float]:
    """Parse optional float (empty = None)."""
    if _is_missing(value):
        return None
    return float(value)


def parse_optional_str(value: Any) -> Optional[str]:
    """Parse optional string (empty = None)."""
    if _is_missing(value):
        return None
    return str(value).strip()


@dataclass
class TraceStep:
    """A single step in the pricing resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class PriceModel:
    """Per-store pricing configuration. Only the fields of the active mode matter."""
    store_id: str
    price_model: str = RETAIL_ONLY
    simple_wholesale_min_qty: int = 10
    simple_wholesale_name: str = DEFAULT_WHOLESALE_NAME
    simple_wholesale_by_cart_total: bool = False
    simple_wholesale_cart_min_qty: int = 10
    gradual_wholesale_enabled: bool = False
    minimum_purchase_enabled: bool = False
    minimum_purchase_amount: float = 0.0
    minimum_purchase_message: str = DEFAULT_MINIMUM_PURCHASE_MESSAGE
    show_price_tiers: bool = True
    show_savings_indicators: bool = True
    show_next_tier_hint: bool = True

    @property
    def is_wholesale_mode(self) -> bool:
        return self.price_model in WHOLESALE_MODELS

    @classmethod
    def default(cls, store_id: str) -> 'PriceModel':
        """Safe fallback: retail pricing, no wholesale."""
        return cls(store_id=str(store_id))

    @classmethod
    def from_record(cls, row: dict) -> 'PriceModel':
        """Create PriceModel from a data-layer row."""
        store_id = parse_optional_str(row.get('store_id'))
        if not store_id:
            raise ValueError("Price model row has no store_id")

        price_model = (parse_optional_str(row.get('price_model')) or RETAIL_ONLY).lower()

        simple_min = parse_optional_int(row.get('simple_wholesale_min_qty')) or 10
        cart_min = parse_optional_int(row.get('simple_wholesale_cart_min_qty')) or 10
        if simple_min < 1 or cart_min < 1:
            raise ValueError(f"Minimum quantities must be positive for store {store_id}")

        return cls(
            store_id=store_id,
            price_model=price_model,
            simple_wholesale_min_qty=simple_min,
            simple_wholesale_name=parse_optional_str(row.get('simple_wholesale_name')) or DEFAULT_WHOLESALE_NAME,
            simple_wholesale_by_cart_total=parse_bool(row.get('simple_wholesale_by_cart_total')),
            simple_wholesale_cart_min_qty=cart_min,
            gradual_wholesale_enabled=parse_bool(row.get('gradual_wholesale_enabled')),
            minimum_purchase_enabled=parse_bool(row.get('minimum_purchase_enabled')),
            minimum_purchase_amount=parse_optional_float(row.get('minimum_purchase_amount')) or 0.0,
            minimum_purchase_message=(
                parse_optional_str(row.get('minimum_purchase_message'))
                or DEFAULT_MINIMUM_PURCHASE_MESSAGE
            ),
            show_price_tiers=parse_bool(row.get('show_price_tiers'), default=True),
            show_savings_indicators=parse_bool(row.get('show_savings_indicators'), default=True),
            show_next_tier_hint=parse_bool(row.get('show_next_tier_hint'), default=True),
        )


@dataclass
class PriceTier:
    """A (quantity threshold, unit price) step of a product's discount ladder."""
    tier_name: str
    min_quantity: int
    price: float
    tier_order: int = 1
    tier_type: str = "gradual"
    is_active: bool = True
    id: Optional[str] = None
    product_id: Optional[str] = None

    @classmethod
    def from_record(cls, row: dict, validate: bool = True) -> 'PriceTier':
        """
        Create PriceTier from a data-layer row.

        With validate=False out-of-range values are kept (missing ones read
        as 0) so admin checks can report them.
        """
        min_quantity = parse_optional_int(row.get('min_quantity'))
        price = parse_optional_float(row.get('price'))

        if validate:
            if min_quantity is None or min_quantity < 1:
                raise ValueError(f"Tier min_quantity must be >= 1, got {row.get('min_quantity')!r}")
            if price is None or price <= 0:
                raise ValueError(f"Tier price must be > 0, got {row.get('price')!r}")

        return cls(
            tier_name=parse_optional_str(row.get('tier_name')) or "Nível Personalizado",
            min_quantity=min_quantity or 0,
            price=price or 0.0,
            tier_order=parse_optional_int(row.get('tier_order')) or 1,
            tier_type=parse_optional_str(row.get('tier_type')) or "gradual",
            is_active=parse_bool(row.get('is_active'), default=True),
            id=parse_optional_str(row.get('id')),
            product_id=parse_optional_str(row.get('product_id')),
        )


@dataclass
class Product:
    """A catalog product with its retail price and optional wholesale data."""
    id: str
    name: str
    retail_price: float
    wholesale_price: Optional[float] = None
    min_wholesale_qty: Optional[int] = None
    store_id: Optional[str] = None
    price_tiers: list[PriceTier] = field(default_factory=list)

    @classmethod
    def from_record(cls, row: dict, tiers: Optional[list[PriceTier]] = None) -> 'Product':
        """Create Product from a data-layer row."""
        product_id = parse_optional_str(row.get('id'))
        if not product_id:
            raise ValueError("Product row has no id")

        retail_price = parse_optional_float(row.get('retail_price'))
        if retail_price is None or retail_price <= 0:
            raise ValueError(f"Product {product_id} has invalid retail_price {row.get('retail_price')!r}")

        return cls(
            id=product_id,
            name=parse_optional_str(row.get('name')) or product_id,
            retail_price=retail_price,
            wholesale_price=parse_optional_float(row.get('wholesale_price')),
            min_wholesale_qty=parse_optional_int(row.get('min_wholesale_qty')),
            store_id=parse_optional_str(row.get('store_id')),
            price_tiers=list(tiers or []),
        )


@dataclass(frozen=True)
class CartLineItem:
    """A product in the cart. ``original_price`` is the retail snapshot taken when added."""
    product: Product
    quantity: int
    original_price: Optional[float] = None
    id: Optional[str] = None

    def __post_init__(self):
        if self.quantity < 1:
            raise ValueError(f"Cart quantity must be >= 1, got {self.quantity}")
        if self.original_price is None:
            object.__setattr__(self, 'original_price', self.product.retail_price)
        if self.id is None:
            object.__setattr__(self, 'id', self.product.id)

    def with_quantity(self, quantity: int) -> 'CartLineItem':
        """Return a copy with a new quantity, keeping the price snapshot."""
        return replace(self, quantity=quantity)


@dataclass
class CurrentTier:
    """The tier a quantity currently falls into."""
    tier_name: str
    price: float
    min_quantity: int = 1


@dataclass
class NextTierHint:
    """Upsell hint towards the next, cheaper tier."""
    quantity_needed: int
    next_tier_name: str
    potential_savings: float
    next_quantity: int


@dataclass
class PriceCalculationResult:
    """Complete result of a unit price calculation."""
    price: float
    percentage: int
    current_tier: CurrentTier
    retail_price: float
    quantity: int
    price_model: str = RETAIL_ONLY
    next_tier_hint: Optional[NextTierHint] = None
    minimum_met: bool = True
    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    @property
    def total(self) -> float:
        return round(self.price * self.quantity, 2)

    @property
    def savings(self) -> float:
        return round(max(0.0, self.retail_price - self.price) * self.quantity, 2)

    @property
    def is_wholesale(self) -> bool:
        return self.price < self.retail_price

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the trace for this calculation."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def add_warning(self, warning: str):
        """Add a warning for this calculation."""
        self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)


@dataclass
class CartLineQuote:
    """A priced cart line."""
    line: CartLineItem
    result: PriceCalculationResult

    @property
    def product_id(self) -> str:
        return self.line.product.id

    @property
    def extended_price(self) -> float:
        return self.result.total


@dataclass
class CartQuote:
    """All cart lines priced under one store price model."""
    store_id: str
    price_model: str
    lines: list[CartLineQuote] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def total_items(self) -> int:
        return sum(q.line.quantity for q in self.lines)

    @property
    def total(self) -> float:
        return round(sum(q.result.total for q in self.lines), 2)

    @property
    def retail_total(self) -> float:
        return round(sum(q.result.retail_price * q.line.quantity for q in self.lines), 2)

    @property
    def savings(self) -> float:
        return round(sum(q.result.savings for q in self.lines), 2)

    @property
    def checkout_blocked(self) -> bool:
        return any(not q.result.minimum_met for q in self.lines)

    def add_warning(self, warning: str):
        """Add a cart-level warning, ignoring duplicates."""
        if warning not in self.warnings:
            self.warnings.append(warning)

    def to_summary_dict(self) -> dict:
        """Flat summary used by the API and logs."""
        return {
            "store_id": self.store_id,
            "price_model": self.price_model,
            "total_items": self.total_items,
            "total": self.total,
            "retail_total": self.retail_total,
            "savings": self.savings,
            "checkout_blocked": self.checkout_blocked,
            "warnings": list(self.warnings),
            "lines": [
                {
                    "id": q.line.id,
                    "product_id": q.product_id,
                    "product_name": q.line.product.name,
                    "quantity": q.line.quantity,
                    "unit_price": q.result.price,
                    "original_price": q.line.original_price,
                    "total": q.result.total,
                    "percentage": q.result.percentage,
                    "tier_name": q.result.current_tier.tier_name,
                    "minimum_met": q.result.minimum_met,
                }
                for q in self.lines
            ],
        }
