"""Generate route modules from the serverless service definitions."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml
from django.core.management.base import BaseCommand, CommandError

from apps.core.contracts.errors import AuthorizationConfigError
from apps.core.contracts.policy import Route
from apps.core.services.route_definitions import build_route_table, route

ROUTES_DIR = Path(__file__).resolve().parents[2] / "services" / "routes"
SERVERLESS_PARAM_RE = re.compile(r"\{([A-Za-z]*)\}")

MODULE_TEMPLATE = '''\
# Generated by generate_routes from {source}. Do not edit.
from __future__ import annotations

from apps.core.services.route_definitions import route

RESOURCE = "{resource}"

ROUTES = (
{routes})
'''


def serverless_path_to_route(path: str) -> str:
    """``child/{id}/attendances`` becomes ``child/:id/attendances``."""
    return SERVERLESS_PARAM_RE.sub(lambda match: ":" + match.group(1), path)


def module_name_for(base_path: str) -> str:
    return base_path.replace("-", "_")


class Command(BaseCommand):
    help = "Generate one route module per service from <services_dir>/*/serverless.yml"

    def add_arguments(self, parser):
        parser.add_argument("services_dir", type=str, help="Directory holding one folder per service")
        parser.add_argument(
            "--output-dir",
            type=str,
            default=str(ROUTES_DIR),
            help="Directory the route modules are written to",
        )

    def handle(self, *args, **options):
        services_dir = Path(options["services_dir"])
        output_dir = Path(options["output_dir"])
        if not services_dir.is_dir():
            raise CommandError(f"Services directory not found: {services_dir}")

        generated: list[tuple[str, str, tuple[Route, ...], Path]] = []
        for service_dir in sorted(item for item in services_dir.iterdir() if item.is_dir()):
            definition = service_dir / "serverless.yml"
            if not definition.exists():
                self.stderr.write(f"{definition} does not exist!")
                continue
            resource, routes = self._routes_for_service(definition)
            generated.append((resource, module_name_for(resource), routes, definition))

        try:
            build_route_table(*(routes for _, _, routes, _ in generated))
        except AuthorizationConfigError as exc:
            raise CommandError(str(exc)) from exc

        output_dir.mkdir(parents=True, exist_ok=True)
        for resource, module_name, routes, definition in generated:
            target = output_dir / f"{module_name}.py"
            target.write_text(self._render_module(resource, routes, definition), encoding="utf-8")
            self.stdout.write(f"{target.name}: {len(routes)} routes")

        self.stdout.write(self.style.SUCCESS(f"Generated {len(generated)} route modules in {output_dir}"))

    def _load(self, definition: Path) -> dict[str, Any]:
        try:
            document = yaml.safe_load(definition.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise CommandError(f"{definition}: invalid YAML: {exc}") from exc
        if not isinstance(document, dict):
            raise CommandError(f"{definition}: expected a mapping at the top level")
        return document

    def _routes_for_service(self, definition: Path) -> tuple[str, tuple[Route, ...]]:
        document = self._load(definition)
        base_path = ((document.get("custom") or {}).get("customDomain") or {}).get("basePath")
        if not isinstance(base_path, str) or not base_path.strip():
            raise CommandError(f"{definition}: custom.customDomain.basePath is missing")
        base_path = base_path.strip().strip("/")

        routes: list[Route] = []
        for function_name, function in (document.get("functions") or {}).items():
            for event in (function or {}).get("events") or []:
                http = event.get("http") if isinstance(event, dict) else None
                if not isinstance(http, dict) or not isinstance(http.get("authorizer"), dict):
                    continue
                permission_name = http["authorizer"].get("permissionNeeded")
                if not permission_name:
                    self.stderr.write(
                        f"{definition}: Function {function_name} has authorizer but is missing 'permissionNeeded' field"
                    )
                    continue
                event_path = serverless_path_to_route(str(http.get("path") or ""))
                if not event_path.startswith("/"):
                    event_path = "/" + event_path
                try:
                    routes.append(route(f"/{base_path}{event_path}", str(http.get("method", "")).upper(), permission_name))
                except AuthorizationConfigError as exc:
                    raise CommandError(f"{definition}: function {function_name}: {exc}") from exc
        return base_path, tuple(routes)

    def _render_module(self, resource: str, routes: tuple[Route, ...], definition: Path) -> str:
        lines = "".join(
            f'    route("{item.path}", "{item.method}", "{item.permission_needed.id}"),\n' for item in routes
        )
        return MODULE_TEMPLATE.format(source=f"{definition.parent.name}/{definition.name}", resource=resource, routes=lines)
