import json
from pathlib import Path

from click.testing import CliRunner

from proto_oas.cli import main

FIXTURES = Path(__file__).parent / "fixtures"

BASIC_ARGS = ["--title", "PetStore Service APIS", "--server", "http://localhost:8080/api-explorer"]


class TestCliConvert:
    def test_convert_to_stdout(self):
        runner = CliRunner()
        result = runner.invoke(main, ["convert", str(FIXTURES / "pet.yaml"), *BASIC_ARGS])

        assert result.exit_code == 0
        assert '"openapi": "3.0.1"' in result.output
        assert '"/Pet/getPet"' in result.output

    def test_convert_to_file(self, tmp_path):
        output_file = tmp_path / "out" / "openapi.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "convert", str(FIXTURES / "pet.yaml"),
            *BASIC_ARGS,
            "-o", str(output_file),
        ])

        assert result.exit_code == 0
        doc = json.loads(output_file.read_text(encoding="utf-8"))
        assert doc["info"]["title"] == "PetStore Service APIS"
        assert doc["servers"] == [{"url": "http://localhost:8080/api-explorer"}]
        assert list(doc["paths"]["/Pet/getPet"]) == ["post"]

    def test_convert_with_config_and_route(self, tmp_path):
        output_file = tmp_path / "openapi.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "convert", str(FIXTURES / "protos"),
            "--config", str(FIXTURES / "options.yaml"),
            "--route", "UserMgnt.getUser=get /users/:userId",
            "-o", str(output_file),
        ])

        assert result.exit_code == 0
        doc = json.loads(output_file.read_text(encoding="utf-8"))
        assert doc["info"]["contact"] == {"email": "support@example.com"}
        assert "get" in doc["paths"]["/UserMgnt/pets"]
        params = doc["paths"]["/users/{userId}"]["get"]["parameters"]
        assert [(p["name"], p["in"]) for p in params] == [("GetUserRequest", "query"), ("userId", "path")]

    def test_convert_requires_title(self):
        runner = CliRunner()
        result = runner.invoke(main, [
            "convert", str(FIXTURES / "pet.yaml"),
            "--server", "http://localhost:8080/api-explorer",
        ])

        assert result.exit_code == 1
        assert '"title" is required.' in result.output

    def test_convert_requires_servers(self):
        runner = CliRunner()
        result = runner.invoke(main, ["convert", str(FIXTURES / "pet.yaml"), "--title", "Demo"])

        assert result.exit_code == 1
        assert '"servers" must be a non-empty array' in result.output

    def test_malformed_route_flag(self):
        runner = CliRunner()
        result = runner.invoke(main, [
            "convert", str(FIXTURES / "pet.yaml"), *BASIC_ARGS, "--route", "Pet.getPet",
        ])

        assert result.exit_code == 2

    def test_route_param_not_in_request(self):
        runner = CliRunner()
        result = runner.invoke(main, [
            "convert", str(FIXTURES / "pet.yaml"), *BASIC_ARGS, "--route", "Pet.getPet=get /pets/:petId",
        ])

        assert result.exit_code == 1
        assert "petId" in result.output

    def test_unresolvable_request_type(self):
        runner = CliRunner()
        result = runner.invoke(main, ["convert", str(FIXTURES / "missing_type.yaml"), *BASIC_ARGS])

        assert result.exit_code == 1
        assert "no such type: PingRequest" in result.output

    def test_malformed_yaml(self, tmp_path):
        f = tmp_path / "tree.yaml"
        f.write_text("nested: [\n  - kind: message\n")
        runner = CliRunner()
        result = runner.invoke(main, ["convert", str(f), *BASIC_ARGS])

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_tree_is_not_a_mapping(self, tmp_path):
        f = tmp_path / "tree.yaml"
        f.write_text("- kind: message\n  name: Ping\n")
        runner = CliRunner()
        result = runner.invoke(main, ["convert", str(f), *BASIC_ARGS])

        assert result.exit_code == 1
        assert "must be a mapping" in result.output


class TestCliRoutes:
    def test_default_routes(self):
        runner = CliRunner()
        result = runner.invoke(main, ["routes", str(FIXTURES / "pet.yaml")])

        assert result.exit_code == 0
        assert "Pet.getPet\tPOST /Pet/getPet" in result.output
        assert "Pet.deletePet\tPOST /Pet/deletePet" in result.output

    def test_routes_from_config_and_flags(self):
        runner = CliRunner()
        result = runner.invoke(main, [
            "-v", "routes", str(FIXTURES / "protos"),
            "--config", str(FIXTURES / "options.yaml"),
            "--route", "UserMgnt.removeUser=delete /users/:userId",
        ])

        assert result.exit_code == 0
        assert "UserMgnt.getPets\tGET /UserMgnt/pets" in result.output
        assert "UserMgnt.getUser\tPOST /store.UserMgnt/getUser" in result.output
        assert "UserMgnt.removeUser\tDELETE /users/{userId}" in result.output

    def test_routes_malformed_yaml(self, tmp_path):
        f = tmp_path / "tree.yaml"
        f.write_text("nested: [\n  - kind: message\n")
        runner = CliRunner()
        result = runner.invoke(main, ["routes", str(f)])

        assert result.exit_code == 1
