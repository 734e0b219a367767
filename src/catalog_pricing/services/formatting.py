"""
Presentation helpers: BRL currency formatting and catalog banner copy.

The engine returns plain numbers; only API and UI consumers format them.
"""
from typing import Optional

from ..engine.models import (
    PriceModel,
    WHOLESALE_ONLY,
    SIMPLE_WHOLESALE,
    GRADUAL_WHOLESALE,
)


def format_brl(value: Optional[float]) -> str:
    """Format a value as Brazilian reais, e.g. 1234.5 -> 'R$ 1.234,50'."""
    if value is None:
        return "R$ 0,00"
    sign = "-" if value < 0 else ""
    text = f"{abs(value):,.2f}"  # 1,234.50
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {text}"


def describe_price_model(price_model: PriceModel) -> Optional[dict]:
    """
    Banner copy for the public catalog.

    Returns None for retail_only (no banner) and unknown models.
    """
    mode = price_model.price_model

    if mode == WHOLESALE_ONLY:
        return {
            "title": "Loja de Atacado",
            "description": (
                f"Vendas apenas no atacado com quantidade mínima de "
                f"{price_model.simple_wholesale_min_qty} unidades por produto."
            ),
            "badge": "Atacado Exclusivo",
            "notice": "Atenção: Todos os produtos têm quantidade mínima obrigatória",
        }

    if mode == SIMPLE_WHOLESALE:
        if price_model.simple_wholesale_by_cart_total:
            description = (
                f"Atacado quando o carrinho tiver "
                f"{price_model.simple_wholesale_cart_min_qty}+ unidades no total."
            )
        else:
            description = (
                f"Preços especiais de atacado para compras a partir de "
                f"{price_model.simple_wholesale_min_qty} unidades por produto."
            )
        return {
            "title": "Varejo e Atacado",
            "description": description,
            "badge": "Atacado Disponível",
            "notice": None,
        }

    if mode == GRADUAL_WHOLESALE:
        return {
            "title": "Atacado Gradativo",
            "description": (
                "Quanto mais você compra, maior o desconto! "
                "Descontos progressivos baseados na quantidade."
            ),
            "badge": "Múltiplos Níveis",
            "notice": "Os preços são calculados automaticamente baseados na quantidade no carrinho",
        }

    return None
