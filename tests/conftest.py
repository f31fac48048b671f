"""
Shared snapshot fixtures for the herold tests.
"""
from __future__ import annotations

import pytest

from herold.models import Person, PersonDetails, ProjectSnapshot


def make_person(
    person_id: str,
    name: str,
    generation: float,
    parents: list[str] | None = None,
    children: list[str] | None = None,
    partner: str | None = None,
    **kwargs,
) -> Person:
    return Person(
        id=person_id,
        name=name,
        gender=kwargs.pop("gender", "other"),
        generation=generation,
        parents=parents or [],
        children=children or [],
        partner=partner,
        details=kwargs.pop("details", PersonDetails()),
        **kwargs,
    )


def make_snapshot(people: list[Person], main_person_id: str | None = None, **kwargs) -> ProjectSnapshot:
    return ProjectSnapshot(
        id=kwargs.pop("id", "test-project"),
        name=kwargs.pop("name", "Test Family"),
        main_person_id=main_person_id if main_person_id is not None else people[0].id,
        members={p.id: p for p in people},
        **kwargs,
    )


@pytest.fixture
def simple_family() -> ProjectSnapshot:
    """Two partners at generation 0 with one shared child at generation 1."""
    return make_snapshot(
        [
            make_person("john", "John", 0, children=["child"], partner="jane", gender="male"),
            make_person("jane", "Jane", 0, children=["child"], partner="john", gender="female"),
            make_person("child", "Child", 1, parents=["john", "jane"]),
        ],
        main_person_id="child",
    )


@pytest.fixture
def three_generations() -> ProjectSnapshot:
    """Grandparents, two children (one partnered in from outside), a grandchild and a blended half-generation."""
    return make_snapshot(
        [
            make_person("erik", "Erik Halling", 0, children=["anna", "olof"], partner="ingrid"),
            make_person("ingrid", "Ingrid Halling", 0, children=["anna", "olof"], partner="erik"),
            make_person("anna", "Anna", 1, parents=["erik", "ingrid"], children=["liv"], partner="bo"),
            make_person("olof", "Olof", 1, parents=["erik", "ingrid"]),
            make_person("bo", "Bo from Dale", 1, children=["liv"], partner="anna"),
            make_person("ward", "Ward of the House", 1.5),
            make_person("liv", "Liv", 2, parents=["anna", "bo"]),
        ],
        main_person_id="anna",
    )
