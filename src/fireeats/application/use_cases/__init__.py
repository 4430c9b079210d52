from .base import UseCase, UseCaseRequest, UseCaseResponse
from .populate import PopulateRequest, PopulateResponse, PopulateRestaurantsUseCase

__all__ = [
    "PopulateRequest",
    "PopulateResponse",
    "PopulateRestaurantsUseCase",
    "UseCase",
    "UseCaseRequest",
    "UseCaseResponse",
]
