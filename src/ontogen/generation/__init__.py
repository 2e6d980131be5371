"""Python code generation from a built ontology model."""
