"""Tests for the entailment and closure rule passes."""

from __future__ import annotations

from rdflib import OWL, RDF, RDFS, XSD

from ontogen.building import rules
from ontogen.building.rules import CLOSURE_RULES, ENTAILMENT_RULES, run_rules


def _load(store, turtle_text):
    from rdflib import Graph

    store.copy_from(Graph().parse(data=turtle_text, format="turtle"))
    return store


def _insert(store, producer):
    return store.insert_where(producer)


def test_pipelines_run_in_declared_order():
    assert [rule.name for rule in ENTAILMENT_RULES] == ["EquivalenceExpansion", "ThingSubsumption"]
    assert [rule.name for rule in CLOSURE_RULES] == [
        "ClassMembership",
        "PropertyMembership",
        "InverseDomainRange",
        "SubpropertyInheritance",
        "DefaultDomain",
        "DefaultRange",
        "LiteralRange",
    ]


def test_rules_insert_nothing_on_a_closed_store(built, animals_ttl):
    builder = built(animals_ttl)
    before = len(builder.store)

    rerun = run_rules(builder.store, ENTAILMENT_RULES + CLOSURE_RULES)

    assert set(rerun.values()) == {0}
    assert len(builder.store) == before


def test_each_rule_is_idempotent(store, animals_ttl):
    _load(store, animals_ttl)
    for rule in ENTAILMENT_RULES + CLOSURE_RULES:
        rule.apply(store)
        assert rule.apply(store) == 0, rule.name


def test_equivalence_expands_to_mutual_subsumption(store, turtle, ex):
    _load(store, turtle("ex:A owl:equivalentClass ex:B ."))
    _insert(store, rules.equivalence_expansion)
    assert (ex.B, OWL.equivalentClass, ex.A) in store
    assert (ex.A, RDFS.subClassOf, ex.B) in store
    assert (ex.B, RDFS.subClassOf, ex.A) in store


def test_thing_subsumption_skips_datatypes_and_reserved_terms(store, turtle, ex):
    _load(store, turtle("""
ex:A a owl:Class .
ex:Code a rdfs:Datatype .
ex:Text rdfs:subClassOf rdfs:Literal .
ex:p a owl:DatatypeProperty ; rdfs:domain ex:B ; rdfs:range xsd:string .
"""))
    _insert(store, rules.thing_subsumption)

    under_thing = set(store.graph.subjects(RDFS.subClassOf, OWL.Thing))
    assert under_thing == {ex.A, ex.B}


def test_class_membership_covers_domains_ranges_and_hierarchy(store, turtle, ex):
    _load(store, turtle("""
ex:p rdfs:domain ex:D ; rdfs:range ex:R .
ex:Sub rdfs:subClassOf ex:Super .
ex:Top rdfs:subClassOf owl:Thing .
ex:Deep rdfs:subClassOf ex:Top .
"""))
    _insert(store, rules.class_membership)
    classes = set(store.graph.subjects(RDF.type, RDFS.Class))
    assert {ex.D, ex.R, ex.Sub, ex.Super, ex.Top, ex.Deep, OWL.Thing} <= classes


def test_property_membership(store, turtle, ex):
    _load(store, turtle("""
ex:d a owl:DatatypeProperty .
ex:o a owl:ObjectProperty .
ex:inv owl:inverseOf ex:o .
ex:child rdfs:subPropertyOf ex:parent .
ex:ranged rdfs:range ex:R .
"""))
    _insert(store, rules.property_membership)
    props = set(store.graph.subjects(RDF.type, RDF.Property))
    assert {ex.d, ex.o, ex.inv, ex.child, ex.parent, ex.ranged} <= props


def test_inverse_supplies_missing_domain_and_range(store, turtle, ex):
    _load(store, turtle("""
ex:owner a rdf:Property ; rdfs:domain ex:Dog ; rdfs:range ex:Person .
ex:owns a rdf:Property ; owl:inverseOf ex:owner .
"""))
    _insert(store, rules.inverse_domain_range)
    assert set(store.graph.objects(ex.owns, RDFS.domain)) == {ex.Person}
    assert set(store.graph.objects(ex.owns, RDFS.range)) == {ex.Dog}


def test_inverse_does_not_override_asserted_values(store, turtle, ex):
    _load(store, turtle("""
ex:owner a rdf:Property ; rdfs:domain ex:Dog ; rdfs:range ex:Person .
ex:owns a rdf:Property ; owl:inverseOf ex:owner ; rdfs:domain ex:Shop .
"""))
    _insert(store, rules.inverse_domain_range)
    assert set(store.graph.objects(ex.owns, RDFS.domain)) == {ex.Shop}
    assert set(store.graph.objects(ex.owns, RDFS.range)) == {ex.Dog}


def test_subproperty_inherits_from_nearest_defining_ancestor(store, turtle, ex):
    _load(store, turtle("""
ex:top a rdf:Property ; rdfs:domain ex:Top ; rdfs:range ex:TopRange .
ex:middle a rdf:Property ; rdfs:subPropertyOf ex:top ; rdfs:domain ex:Middle .
ex:leaf a rdf:Property ; rdfs:subPropertyOf ex:middle .
"""))
    _insert(store, rules.subproperty_inheritance)

    # ex:middle shadows ex:top for the domain, but not for the range.
    assert set(store.graph.objects(ex.leaf, RDFS.domain)) == {ex.Middle}
    assert set(store.graph.objects(ex.leaf, RDFS.range)) == {ex.TopRange}


def test_subproperty_picks_one_value_among_unrelated_ancestors(store, turtle, ex):
    _load(store, turtle("""
ex:left a rdf:Property ; rdfs:domain ex:Left .
ex:right a rdf:Property ; rdfs:domain ex:Right .
ex:both a rdf:Property ; rdfs:subPropertyOf ex:left, ex:right .
"""))
    _insert(store, rules.subproperty_inheritance)
    assert set(store.graph.objects(ex.both, RDFS.domain)) == {ex.Left}


def test_inverse_picks_one_value_among_several_inverses(store, turtle, ex):
    _load(store, turtle("""
ex:i1 a rdf:Property ; rdfs:range ex:R2 .
ex:i2 a rdf:Property ; rdfs:range ex:R1 .
ex:inv a rdf:Property ; owl:inverseOf ex:i1, ex:i2 .
"""))
    _insert(store, rules.inverse_domain_range)
    assert set(store.graph.objects(ex.inv, RDFS.domain)) == {ex.R1}


def test_defaults_apply_only_when_missing(store, turtle, ex):
    _load(store, turtle("""
ex:plain a rdf:Property .
ex:text a rdf:Property, owl:DatatypeProperty .
ex:typed a rdf:Property ; rdfs:domain ex:D ; rdfs:range ex:R .
"""))
    _insert(store, rules.default_domain)
    _insert(store, rules.default_range)

    assert set(store.graph.objects(ex.plain, RDFS.domain)) == {OWL.Thing}
    assert set(store.graph.objects(ex.plain, RDFS.range)) == {OWL.Thing}
    assert set(store.graph.objects(ex.text, RDFS.range)) == {RDFS.Literal}
    assert set(store.graph.objects(ex.typed, RDFS.domain)) == {ex.D}
    assert set(store.graph.objects(ex.typed, RDFS.range)) == {ex.R}


def test_datatype_ranges_become_literal_classes(store, turtle, ex):
    _load(store, turtle("ex:age a owl:DatatypeProperty ; rdfs:range xsd:integer ."))
    _insert(store, rules.literal_range)
    assert (XSD.integer, RDF.type, RDFS.Class) in store
    assert (XSD.integer, RDFS.subClassOf, RDFS.Literal) in store


def test_closure_is_complete(built, animals_ttl):
    builder = built(animals_ttl)
    graph = builder.store.graph
    for prop in graph.subjects(RDF.type, RDF.Property):
        assert len(set(graph.objects(prop, RDFS.domain))) == 1, prop
        assert len(set(graph.objects(prop, RDFS.range))) >= 1, prop
    for cls in graph.transitive_subjects(RDFS.subClassOf, OWL.Thing):
        assert (cls, RDF.type, RDFS.Class) in graph, cls


def test_inferred_domain_is_unique(built, turtle, ex):
    builder = built(turtle("""
ex:parent a rdf:Property ; rdfs:domain ex:A .
ex:child a rdf:Property ; rdfs:subPropertyOf ex:parent .
ex:loose a rdf:Property .
"""))
    graph = builder.store.graph
    assert set(graph.objects(ex.child, RDFS.domain)) == {ex.A}
    assert set(graph.objects(ex.loose, RDFS.domain)) == {OWL.Thing}


def test_built_domain_is_defined_exactly_once(built, turtle, ex):
    builder = built(turtle("""
ex:left a rdf:Property ; rdfs:domain ex:Left .
ex:right a rdf:Property ; rdfs:domain ex:Right .
ex:both a rdf:Property ; rdfs:subPropertyOf ex:left, ex:right .
ex:i1 a rdf:Property ; rdfs:range ex:R1 .
ex:i2 a rdf:Property ; rdfs:range ex:R2 .
ex:inv a rdf:Property ; owl:inverseOf ex:i1, ex:i2 .
"""))
    graph = builder.store.graph
    assert set(graph.objects(ex.both, RDFS.domain)) == {ex.Left}
    assert set(graph.objects(ex.inv, RDFS.domain)) == {ex.R1}
