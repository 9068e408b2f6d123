from pathlib import Path

import pytest

from zodgen.config import parse_config
from zodgen.emitters import (
    ComponentLayout,
    GeneratorContext,
    ImportLine,
    cache_key,
    client_accessor,
    client_type,
    emit_client,
    emit_components,
    emit_handlers,
    emit_routes,
    module_specifier,
)
from zodgen.emitters.base import uses_zod
from zodgen.emitters.clients import client_segments, doc_comment
from zodgen.assembler import build_manifests
from zodgen.expression import CompileContext
from zodgen.schema_ir.refs import ReferenceTable

HEADER = "// Generated by zodgen. Do not edit manually."

TODO_SCHEMA = {
    "type": "object",
    "properties": {"title": {"type": "string", "minLength": 1, "maxLength": 140}},
    "required": ["title"],
}


def todo_document():
    return {
        "openapi": "3.0.3",
        "paths": {
            "/todo": {
                "get": {
                    "summary": "List todos",
                    "parameters": [{"name": "limit", "in": "query", "schema": {"type": "integer"}}],
                    "responses": {
                        "200": {
                            "description": "OK",
                            "content": {
                                "application/json": {
                                    "schema": {"type": "array", "items": {"$ref": "#/components/schemas/Todo"}},
                                },
                            },
                        },
                    },
                },
                "post": {
                    "requestBody": {
                        "required": True,
                        "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Todo"}}},
                    },
                    "responses": {"201": {"description": "Created"}},
                },
            },
        },
        "components": {"schemas": {"Todo": TODO_SCHEMA}},
    }


def client_document():
    return {
        "paths": {
            "/health": {
                "get": {"responses": {"200": {"description": "OK"}}},
                "head": {"responses": {"200": {"description": "OK"}}},
            },
            "/users/{id}": {
                "parameters": [{"name": "id", "in": "path", "schema": {"type": "string"}}],
                "get": {"summary": "Get a user", "responses": {"200": {"description": "OK"}}},
                "delete": {"responses": {"204": {"description": "Deleted"}}},
            },
        },
    }


def prepare(tmp_path, document, **sections):
    config = parse_config({"input": "openapi.yaml", **sections}, tmp_path)
    refs = ReferenceTable(document, config.naming)
    return config, CompileContext(refs), ComponentLayout(config, refs)


@pytest.fixture(scope="module")
def generator():
    return GeneratorContext()


class TestModuleSpecifier:
    @pytest.mark.parametrize(
        "from_file,to_file,expected",
        [
            ("/p/src/routes.ts", "/p/src/schemas/index.ts", "./schemas"),
            ("/p/src/routes.ts", "/p/src/schemas.ts", "./schemas"),
            ("/p/src/handlers/todoHandler.ts", "/p/src/routes.ts", "../routes"),
            ("/p/src/schemas/todo.ts", "/p/src/schemas/tag.ts", "./tag"),
            ("/p/src/schemas/index.ts", "/p/src/schemas/todo.ts", "./todo"),
            ("/p/src/a/b.ts", "/p/lib/c.ts", "../../lib/c"),
        ],
    )
    def test_module_specifier(self, from_file, to_file, expected):
        assert module_specifier(Path(from_file), Path(to_file)) == expected


class TestUsesZod:
    def test_detects_zod(self):
        assert uses_zod(["TodoSchema", "z.array(TodoSchema)"])

    def test_ignores_identifiers_ending_in_z(self):
        assert not uses_zod(["{ schema: TodoSchema }", "abcz.foo", "obj.z.x"])


class TestGeneratorContext:
    def test_templates_precompiled(self, generator):
        assert "routes.ts.jinja" in generator._templates

    def test_header_global(self, generator):
        content = generator.render("index.ts.jinja", specifiers=["./a"])
        assert content == f"{HEADER}\nexport * from './a'\n"


class TestComponentLayout:
    def test_single_file(self, tmp_path):
        config, ctx, layout = prepare(
            tmp_path,
            todo_document(),
            components={"schemas": {"output": "src/schemas.ts"}},
            routes={"output": "src/routes.ts"},
        )
        assert layout.file_for(("schemas", "Todo")) == config.components["schemas"].output

    def test_inline_kinds_go_to_routes(self, tmp_path):
        config, ctx, layout = prepare(tmp_path, todo_document(), routes={"output": "src/routes.ts"})
        assert layout.file_for(("schemas", "Todo")) == config.routes.output
        assert layout.imports_for(config.routes.output, {("schemas", "Todo")}) == []

    def test_split_files_and_barrel(self, tmp_path):
        config, ctx, layout = prepare(
            tmp_path,
            todo_document(),
            components={"schemas": {"output": "src/schemas", "split": True}},
            routes={"output": "src/routes.ts"},
        )
        directory = config.components["schemas"].output
        assert layout.file_for(("schemas", "Todo")) == directory / "todo.ts"
        assert layout.import_target(("schemas", "Todo"), config.routes.output) == directory / "index.ts"
        assert layout.import_target(("schemas", "Todo"), directory / "other.ts") == directory / "todo.ts"

    def test_imports_for(self, tmp_path):
        config, ctx, layout = prepare(
            tmp_path,
            todo_document(),
            components={"schemas": {"output": "src/schemas.ts"}},
            routes={"output": "src/routes.ts"},
        )
        lines = layout.imports_for(config.routes.output, {("schemas", "Todo")})
        assert lines == [ImportLine("./schemas", ("TodoSchema",))]

    def test_unknown_component(self, tmp_path):
        config, ctx, layout = prepare(tmp_path, todo_document(), routes={"output": "src/routes.ts"})
        assert layout.file_for(("schemas", "Missing")) is None


class TestEmitComponents:
    def test_single_file(self, tmp_path, generator):
        config, ctx, layout = prepare(
            tmp_path,
            todo_document(),
            components={"schemas": {"output": "src/schemas.ts"}},
        )
        (generated,) = emit_components("schemas", config.components["schemas"], ctx, layout, generator)

        assert generated.path == config.components["schemas"].output
        assert generated.content == (
            f"{HEADER}\n"
            "import { z } from '@hono/zod-openapi'\n"
            "\n"
            "export const TodoSchema = z.object({ title: z.string().min(1).max(140) }).openapi('Todo')\n"
        )

    def test_export_types(self, tmp_path, generator):
        config, ctx, layout = prepare(
            tmp_path,
            todo_document(),
            components={"schemas": {"output": "src/schemas.ts", "export_types": True}},
        )
        (generated,) = emit_components("schemas", config.components["schemas"], ctx, layout, generator)
        assert generated.content.endswith(
            "export const TodoSchema = z.object({ title: z.string().min(1).max(140) }).openapi('Todo')\n"
            "\n"
            "export type Todo = z.infer<typeof TodoSchema>\n"
        )

    def test_camel_case_type_names(self, tmp_path, generator):
        config, ctx, layout = prepare(
            tmp_path,
            todo_document(),
            naming={"type": "camelCase"},
            components={"schemas": {"output": "src/schemas.ts", "export_types": True}},
        )
        (generated,) = emit_components("schemas", config.components["schemas"], ctx, layout, generator)
        assert "export type todo = z.infer<typeof TodoSchema>\n" in generated.content

    def test_type_alias_never_shadows_a_schema(self, tmp_path, generator):
        document = {
            "components": {
                "schemas": {
                    "User": {"type": "string"},
                    "UserSchema": {"type": "integer"},
                },
            },
        }
        config, ctx, layout = prepare(
            tmp_path,
            document,
            components={"schemas": {"output": "src/schemas.ts", "export_types": True}},
        )
        (generated,) = emit_components("schemas", config.components["schemas"], ctx, layout, generator)
        assert "export const UserSchema = z.string().openapi('User')\n" in generated.content
        assert "export const UserSchemaSchema = z.number().int().openapi('UserSchema')\n" in generated.content
        assert "export type User = z.infer<typeof UserSchema>\n" in generated.content
        assert "export type UserSchema2 = z.infer<typeof UserSchemaSchema>\n" in generated.content
        assert "export type UserSchema =" not in generated.content

    def test_not_exported(self, tmp_path, generator):
        config, ctx, layout = prepare(
            tmp_path,
            todo_document(),
            components={"schemas": {"output": "src/schemas.ts", "export": False}},
        )
        (generated,) = emit_components("schemas", config.components["schemas"], ctx, layout, generator)
        assert "\nconst TodoSchema = " in generated.content
        assert "export" not in generated.content

    def test_lexicographic_order_and_forward_reference(self, tmp_path, generator):
        document = {
            "components": {
                "schemas": {
                    "B": {"type": "string"},
                    "A": {"type": "object", "properties": {"b": {"$ref": "#/components/schemas/B"}}, "required": ["b"]},
                },
            },
        }
        config, ctx, layout = prepare(tmp_path, document, components={"schemas": {"output": "schemas.ts"}})
        (generated,) = emit_components("schemas", config.components["schemas"], ctx, layout, generator)
        assert generated.content == (
            f"{HEADER}\n"
            "import { z } from '@hono/zod-openapi'\n"
            "\n"
            "export const ASchema = z.object({ b: z.lazy(() => BSchema) }).openapi('A')\n"
            "\n"
            "export const BSchema = z.string().openapi('B')\n"
        )

    def test_self_reference(self, tmp_path, generator):
        document = {
            "components": {
                "schemas": {
                    "Node": {
                        "type": "object",
                        "properties": {"children": {"type": "array", "items": {"$ref": "#/components/schemas/Node"}}},
                    },
                },
            },
        }
        config, ctx, layout = prepare(tmp_path, document, components={"schemas": {"output": "schemas.ts"}})
        (generated,) = emit_components("schemas", config.components["schemas"], ctx, layout, generator)
        assert (
            "export const NodeSchema = z.object({ children: z.array(z.lazy(() => NodeSchema)) })"
            ".partial().openapi('Node')\n"
        ) in generated.content

    def test_split_mode(self, tmp_path, generator):
        document = todo_document()
        document["components"]["schemas"] = {
            "Todo": {
                "type": "object",
                "properties": {
                    "title": {"type": "string"},
                    "tag": {"$ref": "#/components/schemas/Tag"},
                },
                "required": ["title"],
            },
            "Tag": {"type": "string"},
        }
        config, ctx, layout = prepare(
            tmp_path,
            document,
            components={"schemas": {"output": "src/schemas", "split": True}},
        )
        directory = config.components["schemas"].output
        files = emit_components("schemas", config.components["schemas"], ctx, layout, generator)

        assert [f.path for f in files] == [directory / "tag.ts", directory / "todo.ts", directory / "index.ts"]
        tag, todo, index = files
        assert tag.content == (
            f"{HEADER}\n"
            "import { z } from '@hono/zod-openapi'\n"
            "\n"
            "export const TagSchema = z.string().openapi('Tag')\n"
        )
        assert todo.content == (
            f"{HEADER}\n"
            "import { z } from '@hono/zod-openapi'\n"
            "import { TagSchema } from './tag'\n"
            "\n"
            "export const TodoSchema = z.object({ title: z.string(), tag: TagSchema.optional() }).openapi('Todo')\n"
        )
        assert index.content == f"{HEADER}\nexport * from './tag'\nexport * from './todo'\n"

    def test_split_mode_cycle_is_lazy(self, tmp_path, generator):
        document = {
            "components": {
                "schemas": {
                    "Author": {
                        "type": "object",
                        "properties": {"posts": {"type": "array", "items": {"$ref": "#/components/schemas/Post"}}},
                        "required": ["posts"],
                    },
                    "Post": {
                        "type": "object",
                        "properties": {"author": {"$ref": "#/components/schemas/Author"}},
                        "required": ["author"],
                    },
                },
            },
        }
        config, ctx, layout = prepare(tmp_path, document, components={"schemas": {"output": "schemas", "split": True}})
        author, post, _ = emit_components("schemas", config.components["schemas"], ctx, layout, generator)
        assert "z.array(z.lazy(() => PostSchema))" in author.content
        assert "z.object({ author: z.lazy(() => AuthorSchema) })" in post.content

    def test_parameters(self, tmp_path, generator):
        document = {
            "components": {
                "parameters": {"limit": {"name": "limit", "in": "query", "schema": {"type": "integer"}}},
            },
        }
        config, ctx, layout = prepare(tmp_path, document, components={"parameters": {"output": "parameters.ts"}})
        (generated,) = emit_components("parameters", config.components["parameters"], ctx, layout, generator)
        assert generated.content.endswith(
            "export const LimitParamsSchema = z.coerce.number().int().optional()"
            ".openapi({ param: { name: 'limit', in: 'query', required: false } })\n"
        )

    def test_responses_without_zod_import(self, tmp_path, generator):
        document = {"components": {"responses": {"NotFound": {"description": "Not found"}}}}
        config, ctx, layout = prepare(tmp_path, document, components={"responses": {"output": "responses.ts"}})
        (generated,) = emit_components("responses", config.components["responses"], ctx, layout, generator)
        assert generated.content == (
            f"{HEADER}\n"
            "\n"
            "export const NotFoundResponse = { description: 'Not found' }\n"
        )

    def test_request_body_hoists_shared_schema(self, tmp_path, generator):
        schema = {"type": "object", "properties": {"a": {"type": "string"}}, "required": ["a"]}
        document = {
            "components": {
                "requestBodies": {
                    "NewTodo": {
                        "content": {
                            "application/json": {"schema": schema},
                            "text/plain": {"schema": schema},
                        },
                    },
                },
            },
        }
        config, ctx, layout = prepare(
            tmp_path, document, components={"request_bodies": {"output": "request-bodies.ts"}}
        )
        (generated,) = emit_components(
            "request_bodies", config.components["request_bodies"], ctx, layout, generator
        )
        assert (
            "const NewTodoRequestBodySchema = z.object({ a: z.string() })\n"
            "export const NewTodoRequestBody = { content: { "
            "'application/json': { schema: NewTodoRequestBodySchema }, "
            "'text/plain': { schema: NewTodoRequestBodySchema } } }\n"
        ) in generated.content

    def test_deterministic(self, tmp_path, generator):
        outputs = []
        for _ in range(2):
            config, ctx, layout = prepare(
                tmp_path,
                todo_document(),
                components={"schemas": {"output": "src/schemas", "split": True}},
            )
            files = emit_components("schemas", config.components["schemas"], ctx, layout, generator)
            outputs.append([(f.path, f.content) for f in files])
        assert outputs[0] == outputs[1]


class TestEmitRoutes:
    def test_inline_components(self, tmp_path, generator):
        config, ctx, layout = prepare(tmp_path, todo_document(), routes={"output": "src/routes.ts"})
        (generated,) = emit_routes(config, ctx, layout, generator)

        assert generated.path == config.routes.output
        assert generated.content == (
            f"{HEADER}\n"
            "import { createRoute, z } from '@hono/zod-openapi'\n"
            "\n"
            "export const TodoSchema = z.object({ title: z.string().min(1).max(140) }).openapi('Todo')\n"
            "\n"
            "export const getTodoRoute = createRoute({\n"
            "  method: 'get',\n"
            "  path: '/todo',\n"
            "  summary: 'List todos',\n"
            "  request: { query: z.object({ limit: z.coerce.number().int().optional()"
            ".openapi({ param: { name: 'limit', in: 'query', required: false } }) }) },\n"
            "  responses: { 200: { description: 'OK', content: { 'application/json': "
            "{ schema: z.array(TodoSchema) } } } },\n"
            "})\n"
            "\n"
            "export const postTodoRoute = createRoute({\n"
            "  method: 'post',\n"
            "  path: '/todo',\n"
            "  request: { body: { content: { 'application/json': { schema: TodoSchema } }, required: true } },\n"
            "  responses: { 201: { description: 'Created' } },\n"
            "})\n"
        )

    def test_imports_components_from_their_files(self, tmp_path, generator):
        config, ctx, layout = prepare(
            tmp_path,
            todo_document(),
            components={"schemas": {"output": "src/schemas", "split": True}},
            routes={"output": "src/routes.ts"},
        )
        (generated,) = emit_routes(config, ctx, layout, generator)
        assert generated.content.startswith(
            f"{HEADER}\n"
            "import { createRoute, z } from '@hono/zod-openapi'\n"
            "import { TodoSchema } from './schemas'\n"
            "\n"
            "export const getTodoRoute = createRoute({\n"
        )

    def test_zod_import_omitted_when_unused(self, tmp_path, generator):
        document = {"paths": {"/health": {"get": {"responses": {"200": {"description": "OK"}}}}}}
        config, ctx, layout = prepare(tmp_path, document, routes={"output": "routes.ts"})
        (generated,) = emit_routes(config, ctx, layout, generator)
        assert "import { createRoute } from '@hono/zod-openapi'\n" in generated.content

    def test_path_prefix_and_metadata(self, tmp_path, generator):
        document = {
            "paths": {
                "/users/{id}": {
                    "get": {
                        "operationId": "getUser",
                        "tags": ["users"],
                        "description": "Fetch one user",
                        "deprecated": True,
                        "responses": {"2XX": {"description": "OK"}},
                    },
                },
            },
        }
        config, ctx, layout = prepare(tmp_path, document, routes={"output": "routes.ts", "path_prefix": "/api"})
        (generated,) = emit_routes(config, ctx, layout, generator)
        assert (
            "export const getUsersIdRoute = createRoute({\n"
            "  method: 'get',\n"
            "  path: '/api/users/{id}',\n"
            "  operationId: 'getUser',\n"
            "  tags: ['users'],\n"
            "  description: 'Fetch one user',\n"
            "  deprecated: true,\n"
            "  responses: { '2XX': { description: 'OK' } },\n"
            "})\n"
        ) in generated.content

    def test_security_and_response_headers(self, tmp_path, generator):
        document = {
            "security": [{"bearer": []}],
            "paths": {
                "/pets": {
                    "get": {
                        "security": [{"petstore_auth": ["write:pets", "read:pets"]}],
                        "responses": {
                            "200": {
                                "description": "OK",
                                "headers": {
                                    "X-Rate-Limit": {
                                        "description": "Calls per hour",
                                        "schema": {"type": "integer"},
                                    },
                                    "X-Request-Id": {"$ref": "#/components/headers/RequestId"},
                                },
                                "content": {"application/json": {"schema": {"type": "string"}}},
                            },
                        },
                    },
                },
                "/health": {"get": {"security": [], "responses": {"200": {"description": "OK"}}}},
                "/me": {"get": {"responses": {"200": {"description": "OK"}}}},
            },
            "components": {
                "securitySchemes": {"bearer": {"type": "http", "scheme": "bearer"}},
                "headers": {"RequestId": {"required": True, "schema": {"type": "string"}}},
            },
        }
        config, ctx, layout = prepare(tmp_path, document, routes={"output": "routes.ts"})
        (generated,) = emit_routes(config, ctx, layout, generator)
        assert (
            "export const getPetsRoute = createRoute({\n"
            "  method: 'get',\n"
            "  path: '/pets',\n"
            "  security: [{ petstore_auth: ['write:pets', 'read:pets'] }],\n"
            "  responses: { 200: { description: 'OK', headers: z.object({ "
            "'X-Rate-Limit': z.number().int().openapi({ description: 'Calls per hour' }).optional(), "
            "'X-Request-Id': z.string() }), "
            "content: { 'application/json': { schema: z.string() } } } },\n"
            "})\n"
        ) in generated.content
        assert "  path: '/health',\n  security: [],\n" in generated.content
        assert "  path: '/me',\n  security: [{ bearer: [] }],\n" in generated.content

    def test_hoisted_schemas_before_route(self, tmp_path, generator):
        schema = {"type": "object", "properties": {"a": {"type": "string"}}, "required": ["a"]}
        document = {
            "paths": {
                "/todo": {
                    "post": {
                        "requestBody": {
                            "content": {"application/json": {"schema": schema}, "text/plain": {"schema": schema}},
                        },
                        "responses": {},
                    },
                },
            },
        }
        config, ctx, layout = prepare(tmp_path, document, routes={"output": "routes.ts"})
        (generated,) = emit_routes(config, ctx, layout, generator)
        assert (
            "\n"
            "const postTodoRequestBodySchema = z.object({ a: z.string() })\n"
            "\n"
            "export const postTodoRoute = createRoute({\n"
        ) in generated.content

    def test_deterministic(self, tmp_path, generator):
        contents = []
        for _ in range(2):
            config, ctx, layout = prepare(tmp_path, todo_document(), routes={"output": "routes.ts"})
            contents.append(emit_routes(config, ctx, layout, generator)[0].content)
        assert contents[0] == contents[1]


class TestEmitHandlers:
    def test_grouped_by_first_segment(self, tmp_path, generator):
        document = todo_document()
        document["paths"]["/users/{id}"] = {"get": {"responses": {}}}
        config, ctx, layout = prepare(
            tmp_path,
            document,
            routes={"output": "src/routes.ts"},
            handlers={"output": "src/handlers"},
        )
        files = emit_handlers(config, ctx, generator)
        directory = config.handlers.output

        assert [f.path for f in files] == [
            directory / "todoHandler.ts",
            directory / "usersHandler.ts",
            directory / "index.ts",
        ]
        assert files[0].content == (
            f"{HEADER}\n"
            "import type { RouteHandler } from '@hono/zod-openapi'\n"
            "import type { getTodoRoute, postTodoRoute } from '../routes'\n"
            "\n"
            "export const getTodoRouteHandler: RouteHandler<typeof getTodoRoute> = async (c) => {}\n"
            "\n"
            "export const postTodoRouteHandler: RouteHandler<typeof postTodoRoute> = async (c) => {}\n"
        )
        assert files[2].content == (
            f"{HEADER}\n"
            "export * from './todoHandler'\n"
            "export * from './usersHandler'\n"
        )

    def test_test_stubs(self, tmp_path, generator):
        config, ctx, layout = prepare(
            tmp_path,
            todo_document(),
            routes={"output": "src/routes.ts"},
            handlers={"output": "src/handlers", "test": True},
        )
        files = emit_handlers(config, ctx, generator)
        names = [f.path.name for f in files]
        assert names == ["todoHandler.ts", "todoHandler.test.ts", "index.ts"]
        assert files[1].content == ""
        assert "test" not in files[2].content


class TestClientHelpers:
    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/users/:id", ["users", ":id"]),
            ("/posts/", ["posts", "index"]),
            ("/", ["index"]),
            ("/todo", ["todo"]),
        ],
    )
    def test_client_segments(self, path, expected):
        assert client_segments(path) == expected

    @pytest.mark.parametrize(
        "path,method,expected",
        [
            ("/todo", "get", "client.todo.$get"),
            ("/users/:id", "get", "client.users[':id'].$get"),
            ("/posts/", "post", "client.posts.index.$post"),
            ("/user-profiles", "get", "client['user-profiles'].$get"),
        ],
    )
    def test_client_accessor(self, path, method, expected):
        assert client_accessor(path, method) == expected

    @pytest.mark.parametrize(
        "path,method,expected",
        [
            ("/todo", "get", "typeof client.todo.$get"),
            ("/users/:id", "get", "(typeof client.users)[':id']['$get']"),
            ("/users/:id/", "get", "(typeof client.users)[':id']['index']['$get']"),
        ],
    )
    def test_client_type(self, path, method, expected):
        assert client_type(path, method) == expected

    def test_cache_key(self, tmp_path):
        config, ctx, layout = prepare(tmp_path, client_document(), routes={"output": "routes.ts"})
        manifests = build_manifests(ctx.refs.document, ctx)
        keys = [cache_key(m) for m in manifests]
        assert keys == [
            "['health', 'GET', '/health', {}]",
            "['health', 'HEAD', '/health', {}]",
            "['users', 'GET', '/users/:id', args]",
            "['users', 'DELETE', '/users/:id', args]",
        ]

    def test_doc_comment(self):
        assert doc_comment(["GET /todo", "", "List todos"]) == "/**\n * GET /todo\n *\n * List todos\n */"


def client_config(tmp_path, document, target):
    return prepare(
        tmp_path,
        document,
        routes={"output": "src/routes.ts"},
        clients={"targets": {target: f"src/{target}.ts"}},
    )


class TestEmitClient:
    @pytest.mark.parametrize("target", ["tanstack-query", "svelte-query", "vue-query", "swr"])
    def test_shared_cache_key(self, tmp_path, generator, target):
        config, ctx, layout = client_config(tmp_path, client_document(), target)
        (generated,) = emit_client(target, config.clients.targets[target], config, ctx, generator)
        assert "return ['users', 'GET', '/users/:id', args] as const\n" in generated.content
        assert "return ['health', 'GET', '/health', {}] as const\n" in generated.content
        assert "import { client } from './client'\n" in generated.content

    @pytest.mark.parametrize("target", ["tanstack-query", "svelte-query", "vue-query", "swr"])
    def test_hooks_skip_head(self, tmp_path, generator, target):
        config, ctx, layout = client_config(tmp_path, client_document(), target)
        (generated,) = emit_client(target, config.clients.targets[target], config, ctx, generator)
        assert "HeadHealth" not in generated.content

    def test_tanstack_query(self, tmp_path, generator):
        config, ctx, layout = client_config(tmp_path, client_document(), "tanstack-query")
        (generated,) = emit_client("tanstack-query", config.clients.targets["tanstack-query"], config, ctx, generator)
        content = generated.content

        assert content.startswith(
            f"{HEADER}\n"
            "import { useQuery, useMutation } from '@tanstack/react-query'\n"
            "import type { UseQueryOptions, QueryFunctionContext, UseMutationOptions } from '@tanstack/react-query'\n"
            "import type { ClientRequestOptions, InferRequestType } from 'hono/client'\n"
            "import { parseResponse } from 'hono/client'\n"
            "import { client } from './client'\n"
        )
        assert (
            "export function getGetUsersIdQueryKey(args: InferRequestType<(typeof client.users)[':id']['$get']>) {\n"
        ) in content
        assert "export function getGetHealthQueryKey() {\n" in content
        assert "export function useGetUsersId(args: InferRequestType<" in content
        assert "export function getDeleteUsersIdMutationKey() {\n  return ['users', 'DELETE', '/users/:id'] as const\n}" in content
        assert "export function useDeleteUsersId(options?: {\n" in content
        assert "/**\n * GET /users/{id}\n *\n * Get a user\n */\nexport function useGetUsersId(" in content

    def test_svelte_query(self, tmp_path, generator):
        config, ctx, layout = client_config(tmp_path, client_document(), "svelte-query")
        (generated,) = emit_client("svelte-query", config.clients.targets["svelte-query"], config, ctx, generator)
        content = generated.content

        assert "import { queryOptions, createQuery, createMutation } from '@tanstack/svelte-query'\n" in content
        assert "export async function getHealth(options?: ClientRequestOptions) {\n" in content
        assert "  return await parseResponse(client.health.$get(undefined, options))\n" in content
        assert "export function createGetUsersId(\n" in content
        assert "export function createDeleteUsersId(\n" in content

    def test_vue_query(self, tmp_path, generator):
        config, ctx, layout = client_config(tmp_path, client_document(), "vue-query")
        (generated,) = emit_client("vue-query", config.clients.targets["vue-query"], config, ctx, generator)
        assert "from '@tanstack/vue-query'\n" in generated.content
        assert "Partial<Omit<UseQueryOptions<" in generated.content

    def test_swr(self, tmp_path, generator):
        config, ctx, layout = client_config(tmp_path, client_document(), "swr")
        (generated,) = emit_client("swr", config.clients.targets["swr"], config, ctx, generator)
        content = generated.content

        assert "import { default as useSWR } from 'swr'\n" in content
        assert "import { default as useSWRMutation } from 'swr/mutation'\n" in content
        assert "export function getGetHealthKey() {\n" in content
        assert "export function useDeleteUsersId(options?: {\n" in content

    def test_rpc(self, tmp_path, generator):
        config, ctx, layout = client_config(tmp_path, client_document(), "rpc")
        (generated,) = emit_client("rpc", config.clients.targets["rpc"], config, ctx, generator)
        content = generated.content

        assert content.startswith(
            f"{HEADER}\n"
            "import type { ClientRequestOptions, InferRequestType } from 'hono/client'\n"
            "import { client } from './client'\n"
        )
        assert "parseResponse" not in content
        assert (
            "/**\n * HEAD /health\n */\n"
            "export async function headHealth(options?: ClientRequestOptions) {\n"
            "  return await client.health.$head(undefined, options)\n"
            "}\n"
        ) in content
        assert (
            "export async function getUsersId(args: InferRequestType<(typeof client.users)[':id']['$get']>, "
            "options?: ClientRequestOptions) {\n"
            "  return await client.users[':id'].$get(args, options)\n"
            "}\n"
        ) in content

    def test_no_args_anywhere(self, tmp_path, generator):
        document = {"paths": {"/health": {"get": {"responses": {"200": {"description": "OK"}}}}}}
        config, ctx, layout = client_config(tmp_path, document, "tanstack-query")
        (generated,) = emit_client("tanstack-query", config.clients.targets["tanstack-query"], config, ctx, generator)
        assert "import type { ClientRequestOptions } from 'hono/client'\n" in generated.content
        assert "InferRequestType" not in generated.content
        assert "useMutation" not in generated.content

    def test_client_import_verbatim(self, tmp_path, generator):
        config, ctx, layout = prepare(
            tmp_path,
            client_document(),
            routes={"output": "src/routes.ts"},
            clients={"client_import": "@/lib/client", "targets": {"rpc": "src/rpc.ts"}},
        )
        (generated,) = emit_client("rpc", config.clients.targets["rpc"], config, ctx, generator)
        assert "import { client } from '@/lib/client'\n" in generated.content

    def test_path_prefix_not_in_keys(self, tmp_path, generator):
        config, ctx, layout = prepare(
            tmp_path,
            client_document(),
            routes={"output": "src/routes.ts", "path_prefix": "/api"},
            clients={"targets": {"swr": "src/swr.ts"}},
        )
        (generated,) = emit_client("swr", config.clients.targets["swr"], config, ctx, generator)
        assert "['users', 'GET', '/users/:id', args]" in generated.content
        assert "/api" not in generated.content

    def test_trailing_slash_operation(self, tmp_path, generator):
        document = {"paths": {"/posts/": {"get": {"responses": {}}}}}
        config, ctx, layout = client_config(tmp_path, document, "tanstack-query")
        (generated,) = emit_client("tanstack-query", config.clients.targets["tanstack-query"], config, ctx, generator)
        assert "export function useGetPostsIndex(" in generated.content
        assert "client.posts.index.$get(undefined, {" in generated.content
