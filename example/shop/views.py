from __future__ import annotations

import json
from decimal import Decimal

from django.db import transaction
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from sale_triggers import (
    InvalidSale,
    ProductNotFound,
    TriggerNotInstalled,
    commissions_for_sale,
    get_product,
    record_sale,
)


def _json(ok: bool, *, detail: str | None = None, status: int = 200, **fields) -> JsonResponse:
    """
    Small helper to keep responses consistent across endpoints.
    Decimals are rendered as strings so no precision is lost.
    """
    payload = {"ok": ok}
    for key, value in fields.items():
        payload[key] = str(value) if isinstance(value, Decimal) else value
    if detail:
        payload["detail"] = detail
    return JsonResponse(payload, status=status)


@csrf_exempt  # demo-only: curl-friendly
@require_POST
def create_sale(request: HttpRequest) -> HttpResponse:
    """
    Record a sale. The trigger decrements stock and creates the commission.

    Body: {"product_id": 1, "quantity": 2, "salesperson_id": 3, "total_price": "2400"}
    """
    try:
        body = json.loads(request.body or b"{}")
    except json.JSONDecodeError:
        return _json(False, detail="invalid JSON body", status=400)

    if not isinstance(body, dict):
        return _json(False, detail="expected a JSON object", status=400)

    try:
        with transaction.atomic():
            sale = record_sale(
                product_id=body.get("product_id"),
                quantity=body.get("quantity"),
                salesperson_id=body.get("salesperson_id"),
                total_price=body.get("total_price"),
            )
            commissions = commissions_for_sale(sale.id)
            if not commissions:
                # Raising rolls the sale back with the atomic block.
                raise TriggerNotInstalled(
                    "Sale was not handled: no commission was recorded"
                )
            product = get_product(sale.product_id)
    except InvalidSale as e:
        return _json(False, detail=str(e), status=400)
    except ProductNotFound as e:
        return _json(False, detail=str(e), status=404)
    except TriggerNotInstalled as e:
        return _json(False, detail=str(e), status=503)

    commission = commissions[0]

    return _json(
        True,
        sale_id=sale.id,
        product_id=product.id,
        stock_quantity=product.stock_quantity,
        total_price=sale.total_price,
        commission_amount=commission.commission_amount,
        status=201,
    )


@require_GET
def product_detail(request: HttpRequest, product_id: int) -> HttpResponse:
    try:
        product = get_product(product_id)
    except ProductNotFound as e:
        return _json(False, detail=str(e), status=404)

    return _json(
        True,
        product_id=product.id,
        name=product.name,
        price=product.price,
        stock_quantity=product.stock_quantity,
    )
