"""Shared test fixtures for the OntoGen test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from rdflib import Namespace

from ontogen.building.builder import OntologyModelBuilder
from ontogen.building.store import StatementStore
from ontogen.utils.reasoning import check_consistency_structural, skip_consistency_check

PREFIXES = """\
@prefix ex:   <http://example.org/schema#> .
@prefix rdf:  <http://www.w3.org/1999/02/22-rdf-syntax-ns#> .
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .
@prefix owl:  <http://www.w3.org/2002/07/owl#> .
@prefix xsd:  <http://www.w3.org/2001/XMLSchema#> .
"""

EX = Namespace("http://example.org/schema#")


# ============================================================================
# Namespaces
# ============================================================================

@pytest.fixture
def ex() -> Namespace:
    """The namespace every test schema is written in."""
    return EX


# ============================================================================
# Schema Fixtures
# ============================================================================

@pytest.fixture
def turtle() -> Callable[[str], str]:
    """Prefix a Turtle body with the common prefixes."""
    def _turtle(body: str) -> str:
        return PREFIXES + body
    return _turtle


@pytest.fixture
def animals_ttl(turtle) -> str:
    """A small schema with a hierarchy, an equivalence and typed properties."""
    return turtle("""
ex:Animal a owl:Class ;
    rdfs:label "Animal"@en ;
    rdfs:comment "Any living creature." .
ex:Dog a owl:Class ; rdfs:subClassOf ex:Animal .
ex:Hound a owl:Class ; owl:equivalentClass ex:Dog .
ex:Person a owl:Class .

ex:name a owl:DatatypeProperty ;
    rdfs:domain ex:Animal ;
    rdfs:range xsd:string .
ex:age a owl:DatatypeProperty, owl:FunctionalProperty ;
    rdfs:domain ex:Animal ;
    rdfs:range xsd:integer .
ex:owner a owl:ObjectProperty ;
    rdfs:domain ex:Dog ;
    rdfs:range ex:Person .
ex:owns a owl:ObjectProperty ;
    owl:inverseOf ex:owner .
""")


# ============================================================================
# Builder Fixtures
# ============================================================================

@pytest.fixture
def store() -> StatementStore:
    return StatementStore()


@pytest.fixture
def make_builder() -> Callable[..., OntologyModelBuilder]:
    """Create a builder holding the given Turtle sources (no Java needed)."""
    def _make_builder(*sources: str, structural: bool = False) -> OntologyModelBuilder:
        check = check_consistency_structural if structural else skip_consistency_check
        builder = OntologyModelBuilder(consistency_check=check)
        for source in sources:
            builder.add_schema(source, schema_format="TURTLE")
        return builder
    return _make_builder


@pytest.fixture
def built(make_builder) -> Callable[..., OntologyModelBuilder]:
    """Create and build a builder holding the given Turtle sources."""
    def _built(*sources: str) -> OntologyModelBuilder:
        builder = make_builder(*sources)
        builder.build()
        return builder
    return _built
