"""End-to-end tests for swaggen.generator.pipeline.generate."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from swaggen.exceptions import GenerationError
from swaggen.generator.pipeline import generate
from swaggen.models import Document, FolderRule, GenerationOptions, SpecVersion


def _files(output) -> dict[str, str]:
    return {
        "/".join(group.folder + [f.filename]): f.body
        for group in output.groups
        for f in group.files
    }


class TestGenerate:
    def test_petstore_layout(self, petstore_doc: Document) -> None:
        output = generate(petstore_doc)
        assert output.service_name == "PetStoreService"
        assert output.spec_version is SpecVersion.SWAGGER_2
        assert output.operation_count == 6
        assert list(_files(output)) == [
            "PetStoreService/Root/types.ts",
            "PetStoreService/Root/PetStoreServiceRootClient.ts",
            "PetStoreService/Pets/types.ts",
            "PetStoreService/Pets/PetStoreServicePetsClient.ts",
            "PetStoreService/Store/types.ts",
            "PetStoreService/Store/PetStoreServiceStoreClient.ts",
        ]

    def test_preview(self, activity_doc: Document) -> None:
        assert generate(activity_doc).preview == (
            "ActivityService/\n"
            "  Activity/\n"
            "    ActivityServiceActivityClient.ts\n"
            "    types.ts\n"
            "  Root/\n"
            "    ActivityServiceRootClient.ts\n"
            "    types.ts\n"
            "  Therapist/\n"
            "    ActivityServiceTherapistClient.ts\n"
            "    types.ts"
        )

    def test_types_file_holds_schemas_and_group_endpoints(self, activity_doc: Document) -> None:
        files = _files(generate(activity_doc))
        root_types = files["ActivityService/Root/types.ts"]
        assert "export interface ActivityPlanSchedule {" in root_types
        assert "export interface Note { text?: string; 'x-trace-id'?: string }" in root_types
        assert "export type getHealthResponse = any;" in root_types
        assert "getActivityPlanScheduleByIdResponse" not in root_types
        assert "NoteAlias" not in root_types

        activity_types = files["ActivityService/Activity/types.ts"]
        assert "export type deleteActivityPlanScheduleRequest = string[];" in activity_types
        assert "export interface deleteActivityPlanScheduleResponse { deleted: number }" in (
            activity_types
        )
        assert "getHealthResponse" not in activity_types

    def test_schema_types_precede_endpoint_types(self, petstore_doc: Document) -> None:
        types = _files(generate(petstore_doc))["PetStoreService/Store/types.ts"]
        assert types.index("export interface Pet ") < types.index("getStoreInventoryResponse")
        assert "export type getStoreInventoryResponse = Record<string, number>;" in types

    def test_client_uses_base_url_and_transport(self, petstore_doc: Document) -> None:
        options = GenerationOptions(transport_import_path="@/lib/http")
        client = _files(generate(petstore_doc, options))[
            "PetStoreService/Root/PetStoreServiceRootClient.ts"
        ]
        assert "from '@/lib/http';" in client
        assert "Base URL: https://petstore.example.com/v1" in client

    def test_service_name_override(self, activity_doc: Document) -> None:
        output = generate(activity_doc, GenerationOptions(service_name_override="Acts"))
        assert output.service_name == "Acts"
        assert output.groups[0].folder == ["Acts", "Root"]

    def test_custom_folder_rules(self, activity_doc: Document) -> None:
        options = GenerationOptions(folder_rules=[FolderRule(match="patients", folder="Patients")])
        folders = [g.folder[-1] for g in generate(activity_doc, options).groups]
        assert folders == ["Root", "Activity", "Therapist", "Patients"]

    def test_regeneration_is_identical(self, activity_doc: Document) -> None:
        assert generate(activity_doc) == generate(activity_doc)

    def test_empty_document(self, make_doc) -> None:
        output = generate(make_doc(title=None))
        assert output.service_name == "ApiService"
        assert output.groups == []
        assert output.preview == ""

    def test_type_names_unique_per_run(self, make_doc) -> None:
        doc = make_doc(
            paths={"/addresses": {"get": {"responses": {}}}},
            schemas={
                "Address": {"type": "object", "properties": {"street": {"type": "string"}}},
                "address": {"type": "object", "properties": {"city": {"type": "string"}}},
            },
        )
        types = _files(generate(doc))["TestService/Root/types.ts"]
        assert "export interface Address { street?: string }" in types
        assert "export interface Address1 { city?: string }" in types

    def test_recursion_error_becomes_generation_error(self, activity_doc: Document) -> None:
        with patch(
            "swaggen.generator.pipeline.synthesize_schema_types",
            side_effect=RecursionError("maximum recursion depth exceeded"),
        ):
            with pytest.raises(GenerationError, match="too deep"):
                generate(activity_doc)
