from zodgen.shared.errors import (
    MalformedContentError,
    MissingInputError,
    SchemaError,
    SchemaValidationError,
    UnresolvableReferenceError,
)


class TestSchemaError:
    def test_init_no_path(self):
        error = SchemaError("test message")
        assert str(error) == "test message"
        assert error.schema_path is None

    def test_init_with_path(self):
        error = SchemaError("test message", "#/components/schemas/User")
        assert str(error) == "[#/components/schemas/User] test message"
        assert error.schema_path == "#/components/schemas/User"


class TestSchemaValidationError:
    def test_init_no_field_no_path(self):
        error = SchemaValidationError("validation failed")
        assert str(error) == "validation failed"
        assert error.field is None
        assert error.schema_path is None

    def test_init_with_field(self):
        error = SchemaValidationError("must be a mapping", field="routes")
        assert str(error) == "Field 'routes': must be a mapping"
        assert error.field == "routes"

    def test_init_with_field_and_path(self):
        error = SchemaValidationError("must be a mapping", "zodgen.yaml", "routes")
        assert str(error) == "[zodgen.yaml] Field 'routes': must be a mapping"
        assert error.schema_path == "zodgen.yaml"

    def test_inheritance(self):
        assert isinstance(SchemaValidationError("x"), SchemaError)


class TestUnresolvableReferenceError:
    def test_message_and_ref(self):
        error = UnresolvableReferenceError("#/components/schemas/Missing", "#/paths/~1todo/get")
        assert str(error) == "[#/paths/~1todo/get] Unresolvable reference '#/components/schemas/Missing'"
        assert error.ref == "#/components/schemas/Missing"

    def test_without_pointer(self):
        error = UnresolvableReferenceError("other.yaml#/Pet")
        assert str(error) == "Unresolvable reference 'other.yaml#/Pet'"


class TestOtherErrors:
    def test_missing_input(self):
        error = MissingInputError("Document contains no paths")
        assert isinstance(error, SchemaError)
        assert str(error) == "Document contains no paths"

    def test_malformed_content(self):
        error = MalformedContentError("content map is missing", "#/paths/~1todo/post/requestBody/content")
        assert isinstance(error, SchemaError)
        assert str(error).startswith("[#/paths/~1todo/post/requestBody/content] ")
