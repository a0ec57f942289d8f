"""Print the validated route table."""

import json

from django.core.management.base import BaseCommand

from apps.core.services.permission_registry import all_routes, routes_by_resource


class Command(BaseCommand):
    help = "Show every guarded route and the permission it needs, grouped by resource"

    def add_arguments(self, parser):
        parser.add_argument(
            "--format",
            type=str,
            default="text",
            choices=["text", "json"],
            help="Output format",
        )

    def handle(self, *args, **options):
        grouped = routes_by_resource()

        if options["format"] == "json":
            payload = {
                resource: [
                    {"method": item.method, "path": item.path, "permission": item.permission_needed.id}
                    for item in routes
                ]
                for resource, routes in grouped.items()
            }
            self.stdout.write(json.dumps(payload, indent=2))
            return

        for resource, routes in grouped.items():
            self.stdout.write(self.style.MIGRATE_HEADING(f"{resource} ({len(routes)})"))
            for item in routes:
                self.stdout.write(f"  {item.method:<6} {item.path:<55} {item.permission_needed.id}")
        self.stdout.write(f"\n{len(all_routes())} routes")
