"""End-to-end tests of the model builder, including the reference scenarios."""

from __future__ import annotations

import pytest
from rdflib import OWL, RDF, RDFS, Graph

from ontogen.building.builder import OntologyModelBuilder
from ontogen.building.store import StatementStore
from ontogen.errors import ConsistencyError, ModelBuildingError
from ontogen.utils.reasoning import ValidityReport


def test_subclass_of_equivalent_pair(built, turtle, ex):
    builder = built(turtle("""
ex:C1 rdfs:subClassOf ex:C2 .
ex:C2 owl:equivalentClass ex:C3 .
ex:p rdfs:domain ex:C1 .
"""))

    props = {prop.iri: prop for prop in builder.get_properties()}
    assert props[ex.p].domains == (ex.C1,)
    assert props[ex.p].ranges == (OWL.Thing,)

    distinct = {cls.iri for cls in builder.get_distinct_classes()}
    assert len(distinct & {ex.C2, ex.C3}) == 1
    assert ex.C1 in distinct


def test_subproperty_inherits_domain_and_range(built, turtle, ex):
    builder = built(turtle("""
ex:p1 a rdf:Property ; rdfs:domain owl:Thing ; rdfs:range rdfs:Literal .
ex:p2 a rdf:Property ; rdfs:subPropertyOf ex:p1 .
"""))
    props = {prop.iri: prop for prop in builder.get_properties()}
    assert props[ex.p2].domains == (OWL.Thing,)
    assert props[ex.p2].ranges == (RDFS.Literal,)


def test_unreferenced_resource_is_not_promoted(built, turtle, ex):
    builder = built(turtle("""
ex:A a owl:Class .
ex:loner rdfs:label "Just a label" .
"""))
    class_iris = {cls.iri for cls in builder.get_classes()}
    prop_iris = {prop.iri for prop in builder.get_properties()}
    assert ex.loner not in class_iris
    assert ex.loner not in prop_iris
    assert (ex.loner, RDF.type, RDFS.Class) not in builder.store.graph


def test_inconsistent_schema_fails_before_copy(turtle, ex):
    report = ValidityReport(valid=False, violations=("clash",), check_method="fake")
    builder = OntologyModelBuilder(consistency_check=lambda graph: report)
    builder.add_schema(turtle("ex:A a owl:Class ."), schema_format="TURTLE")

    with pytest.raises(ConsistencyError, match="clash") as excinfo:
        builder.build()

    assert excinfo.value.report is report
    assert len(builder.store) == 0
    assert not builder.is_built


def test_structural_check_rejects_disjoint_individual(make_builder, turtle):
    builder = make_builder(
        turtle("""
ex:Cat a owl:Class ; owl:disjointWith ex:Dog .
ex:Dog a owl:Class .
ex:rex a ex:Cat, ex:Dog .
"""),
        structural=True,
    )
    with pytest.raises(ConsistencyError):
        builder.build()
    assert len(builder.store) == 0


def test_crashing_check_is_a_consistency_error(turtle):
    def broken(graph):
        raise OSError("no java")

    builder = OntologyModelBuilder(consistency_check=broken)
    builder.add_schema(turtle("ex:A a owl:Class ."), schema_format="TURTLE")
    with pytest.raises(ConsistencyError, match="no java"):
        builder.build()


def test_build_seeds_baseline_vocabulary(built, turtle):
    builder = built(turtle("ex:A a owl:Class ."))
    graph = builder.store.graph
    assert (RDFS.label, RDF.type, RDF.Property) in graph
    assert (OWL.Thing, RDF.type, RDFS.Class) in graph
    assert (RDFS.Literal, RDF.type, RDFS.Class) in graph


def test_build_writes_into_a_caller_owned_graph(turtle, ex):
    graph = Graph()
    builder = OntologyModelBuilder(store=graph, consistency_check=lambda g: ValidityReport(valid=True))
    builder.add_schema(turtle("ex:A a owl:Class ."), schema_format="TURTLE")
    builder.build()

    assert builder.is_built
    assert (ex.A, RDFS.subClassOf, OWL.Thing) in graph
    assert builder.last_normalization is not None


def test_failed_build_poisons_the_builder(make_builder, animals_ttl, monkeypatch):
    builder = make_builder(animals_ttl)

    def explode(store):
        raise RuntimeError("store fault")

    monkeypatch.setattr("ontogen.building.builder.normalize_equivalences", explode)

    with pytest.raises(ModelBuildingError, match="store fault") as excinfo:
        builder.build()
    assert isinstance(excinfo.value.__cause__, RuntimeError)

    with pytest.raises(ModelBuildingError, match="previous build failed"):
        builder.get_classes()
    with pytest.raises(ModelBuildingError):
        builder.build()


def test_repr_mentions_state(make_builder, animals_ttl):
    builder = make_builder(animals_ttl)
    assert "state='pending'" in repr(builder)
    assert "sources=1" in repr(builder)


def test_store_argument_accepts_statement_store(turtle):
    store = StatementStore()
    builder = OntologyModelBuilder(store=store, consistency_check=lambda g: ValidityReport(valid=True))
    assert builder.store is store
