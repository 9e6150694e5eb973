"""Quickstart: register factories in any order and resolve the top-level service.

Factories receive ``get`` and await whatever they need. The locator works out
the construction order while resolving.
"""

from __future__ import annotations

import asyncio

from autolocator import Getter, ServiceLocator


class Water:
    def __init__(self) -> None:
        self.liters = 1


class Soil:
    def __init__(self, quality: str) -> None:
        self.quality = quality


class Orange:
    def __init__(self, water: Water, soil: Soil) -> None:
        self.water = water
        self.soil = soil


async def create_soil(_get: Getter) -> Soil:
    await asyncio.sleep(0.01)
    return Soil(quality="rich")


async def create_orange(get: Getter) -> Orange:
    return Orange(await get(Water), await get(Soil))


async def main() -> None:
    locator = ServiceLocator()
    locator.register_singleton(Orange, create_orange)
    locator.register_singleton(Water, lambda _get: Water())
    locator.register_singleton(Soil, create_soil)

    orange = await locator.get(Orange)
    print(f"soil={orange.soil.quality}")  # => soil=rich

    water = await locator.get(Water)
    print(f"shared_water={orange.water is water}")  # => shared_water=True


if __name__ == "__main__":
    asyncio.run(main())
