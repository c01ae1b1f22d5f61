from dataclasses import dataclass, field


@dataclass(frozen=True)
class PartAvailability:
    product_title: str = ""
    pickup_quote: str = ""


@dataclass(frozen=True)
class Store:
    store_name: str = ""
    parts_availability: list[PartAvailability] = field(default_factory=list)


@dataclass(frozen=True)
class SearchResponse:
    stores: list[Store] = field(default_factory=list)
