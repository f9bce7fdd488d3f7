# /nftdex/api/deps.py
from fastapi import Request

from nftdex.core.services import Services


def get_services(request: Request) -> Services:
    return request.app.state.services
