"""Landing page content."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class Section:
    title: str
    path: str
    description: str


@dataclass
class HomeView:
    using_mock: bool = False
    poll_interval: float = 5.0
    sections: List[Section] = field(init=False)

    def __post_init__(self) -> None:
        self.sections = [
            Section(
                title="Admin Dashboard",
                path="/admin",
                description="Manage your product catalog. Create, update, and delete products.",
            ),
            Section(
                title="User Catalog",
                path="/catalog",
                description=(
                    "Browse the product catalog and like your favorite products. "
                    f"Like counts refresh every {self.poll_interval:g} seconds."
                ),
            ),
        ]

    @property
    def data_source(self) -> str:
        if self.using_mock:
            return "Running with the local mock store."
        return "Connected to the admin and catalog services."
