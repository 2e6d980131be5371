"""Tests for Python code generation from a built model."""

from __future__ import annotations

import ast
import importlib
import sys

import pytest
from rdflib import OWL, RDF, URIRef

from ontogen.building.materializer import ClassDescriptor
from ontogen.errors import CodeGenerationError
from ontogen.generation.emitter import (
    CodeEmitter,
    collect_ancestors,
    direct_bases,
    format_docstring,
    generate_python_files,
)
from ontogen.generation.naming import NamespaceResolver


@pytest.fixture
def clean_modules():
    """Forget generated packages imported by a test."""
    yield
    for name in [module for module in sys.modules if module.startswith("zoo_gen")]:
        del sys.modules[name]


def _descriptor(iri, *superclasses, is_literal=False):
    return ClassDescriptor(
        iri=URIRef(iri),
        label=None,
        comment=None,
        superclasses=tuple(URIRef(base) for base in superclasses),
        subclasses=(),
        equivalent_classes=(),
        disjoint_with=(),
        is_literal=is_literal,
    )


def _class_iri(module: ast.Module, class_name: str) -> str:
    """Return the `__iri__` of a generated class, which must be a plain string literal."""
    cls = next(node for node in module.body if isinstance(node, ast.ClassDef) and node.name == class_name)
    assignment = next(
        node
        for node in cls.body
        if isinstance(node, ast.Assign) and [ast.unparse(target) for target in node.targets] == ["__iri__"]
    )
    assert isinstance(assignment.value, ast.Constant)
    assert type(assignment.value.value) is str
    return assignment.value.value


def test_generated_files_compile(tmp_path, make_builder, animals_ttl):
    builder = make_builder(animals_ttl)
    emitted = generate_python_files(builder, tmp_path, resolver=NamespaceResolver(base_namespace="gen"))

    assert [item.target.class_name for item in emitted] == ["Animal", "Dog", "Person"]
    for item in emitted:
        assert item.type_path.parent == tmp_path / "gen" / "org" / "example" / "schema"
        module = ast.parse(item.type_path.read_text(encoding="utf-8"))
        assert _class_iri(module, item.target.class_name) == f"http://example.org/schema#{item.target.class_name}"
        ast.parse(item.support_path.read_text(encoding="utf-8"))

    for package in ("gen", "gen/org", "gen/org/example", "gen/org/example/schema"):
        assert (tmp_path / package / "__init__.py").is_file()


def test_generated_classes_import_and_work(tmp_path, make_builder, animals_ttl, monkeypatch, clean_modules):
    builder = make_builder(animals_ttl)
    generate_python_files(builder, tmp_path, resolver=NamespaceResolver(base_namespace="zoo_gen", policy="flat"))
    monkeypatch.syspath_prepend(str(tmp_path))

    animal_module = importlib.import_module("zoo_gen.animal")
    dog_module = importlib.import_module("zoo_gen.dog")
    support_module = importlib.import_module("zoo_gen.dog_support")

    rex = support_module.DogSupport("http://example.org/data#rex", age=3, name={"Rex"})
    assert isinstance(rex, dog_module.Dog)
    assert isinstance(rex, animal_module.Animal)
    assert dog_module.Dog.__iri__ == "http://example.org/schema#Dog"
    assert type(dog_module.Dog.__iri__) is str
    assert rex.age == 3
    assert rex.name == {"Rex"}
    assert rex.owner == set()

    rex.age = None
    assert rex.age is None

    types = {obj for _, predicate, obj in rex.to_statements() if predicate == RDF.type}
    assert types == {
        URIRef("http://example.org/schema#Dog"),
        URIRef("http://example.org/schema#Animal"),
        OWL.Thing,
    }


def test_fields_follow_domains_and_ancestors(tmp_path, make_builder, animals_ttl):
    builder = make_builder(animals_ttl)
    emitted = generate_python_files(builder, tmp_path)
    sources = {item.target.class_name: item.type_path.read_text(encoding="utf-8") for item in emitted}

    assert "def owner(self) -> set[Person]:" in sources["Dog"]
    assert "def age(self) -> int | None:" in sources["Dog"]
    assert "def name(self) -> set[str]:" in sources["Animal"]
    assert "def owner(" not in sources["Animal"]
    assert "def owns(self) -> set[Dog]:" in sources["Person"]
    assert "class Dog(Animal):" in sources["Dog"]
    assert "class Animal(ResourceObject):" in sources["Animal"]


def test_reserved_and_literal_classes_are_skipped():
    emitter = CodeEmitter()
    targets = emitter.plan(
        [
            _descriptor("http://example.org/a#Dog"),
            _descriptor(str(OWL.Thing)),
            _descriptor("http://example.org/a#Code", is_literal=True),
        ]
    )
    assert list(targets) == [URIRef("http://example.org/a#Dog")]


def test_clashing_names_get_numeric_suffixes():
    emitter = CodeEmitter(resolver=NamespaceResolver(policy="flat"))
    targets = emitter.plan(
        [
            _descriptor("http://example.org/a#Dog"),
            _descriptor("http://example.org/b#Dog"),
            _descriptor("http://example.org/c#dog"),
        ]
    )
    assert [target.class_name for target in targets.values()] == ["Dog", "Dog2", "Dog3"]
    assert len({target.module_name for target in targets.values()}) == 3


def test_redundant_bases_are_dropped():
    a = "http://example.org/a#A"
    b = "http://example.org/a#B"
    c = "http://example.org/a#C"
    classes = [_descriptor(a), _descriptor(b, a), _descriptor(c, a, b)]
    emitter = CodeEmitter()
    targets = emitter.plan(classes)
    superclasses = {cls.iri: cls.superclasses for cls in classes}

    assert collect_ancestors(URIRef(c), superclasses) == {URIRef(a), URIRef(b)}
    assert direct_bases(classes[2], targets, superclasses) == [URIRef(b)]


def test_invalid_output_directory(tmp_path, make_builder, animals_ttl):
    target = tmp_path / "taken"
    target.write_text("", encoding="utf-8")
    with pytest.raises(CodeGenerationError, match="must be a directory"):
        generate_python_files(make_builder(animals_ttl), target)


def test_unwritable_output_directory_fails_without_classes(tmp_path, make_builder, turtle, monkeypatch):
    builder = make_builder(turtle("ex:p a rdf:Property .\n"))
    monkeypatch.setattr("ontogen.paths.os.access", lambda path, mode: False)
    with pytest.raises(CodeGenerationError, match="not writable"):
        generate_python_files(builder, tmp_path)


def test_build_failures_are_wrapped(tmp_path, make_builder, turtle):
    builder = make_builder(
        turtle("""
ex:Cat a owl:Class ; owl:disjointWith ex:Dog .
ex:Dog a owl:Class .
ex:rex a ex:Cat, ex:Dog .
"""),
        structural=True,
    )
    with pytest.raises(CodeGenerationError, match="could not be built"):
        generate_python_files(builder, tmp_path)


def test_write_failures_are_wrapped(tmp_path, make_builder, animals_ttl, monkeypatch):
    def refuse(self, *args, **kwargs):
        raise PermissionError("read-only")

    monkeypatch.setattr("pathlib.Path.write_text", refuse)
    with pytest.raises(CodeGenerationError, match="read-only"):
        generate_python_files(make_builder(animals_ttl), tmp_path)


def test_docstrings_are_escaped():
    assert format_docstring('say """hi"""') == 'say \\"\\"\\"hi\\"\\"\\"'
    assert format_docstring('ends with "quote"') == 'ends with "quote\\"'
    assert format_docstring("a\nb", indent=4) == "a\n    b"
