from fastapi import Request

from services.price_lookup import PriceLookup


def get_price_lookup(request: Request) -> PriceLookup:
    return request.app.state.price_lookup
