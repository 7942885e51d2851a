#!/usr/bin/env python3
"""
YAM Dashboard CLI - billing, retroplanning and maintenance from the terminal.
"""

import sys
from pathlib import Path

from lib import config, db, records
from lib.billing import PROJECT_BILLING_LABELS, compute_project_billing, format_euro
from lib.entities import TASK_COLORS
from lib.errors import AppError, get_error_message
from lib.observability import HealthChecker, RequestContext, configure_from_settings
from lib.retroplanning import compute_dates_from_deadline, days_between
from lib.state_store import get_store


def print_header(text: str):
    """Print a section header."""
    print(f"\n{'═' * 50}")
    print(f"  {text}")
    print(f"{'═' * 50}")


def print_table(headers: list, rows: list, widths: list = None):
    """Print a simple table."""
    if not widths:
        widths = [
            max(len(str(row[i])) for row in [headers] + rows) for i in range(len(headers))
        ]

    header_str = " │ ".join(str(h).ljust(w) for h, w in zip(headers, widths, strict=False))
    print(header_str)
    print("─" * len(header_str))

    for row in rows:
        print(" │ ".join(str(c)[:w].ljust(w) for c, w in zip(row, widths, strict=False)))


def print_tasks(tasks):
    rows = [
        [t.label, t.start_date, t.end_date, days_between(t.start_date, t.end_date), t.color]
        for t in tasks
    ]
    print_table(["Étape", "Début", "Fin", "Jours", "Couleur"], rows)


def cmd_billing(args):
    """Show the billing status of a project."""
    if not args:
        print("Usage: billing <project_id>")
        return

    project = records.get_project(args[0])
    deliverables = records.list_deliverables(project_id=project.id)
    info = compute_project_billing(project, deliverables)

    print_header(f"FACTURATION: {project.name}")
    print(f"\n  Statut        {PROJECT_BILLING_LABELS[info.status.value]}")
    print(f"  Devis         {format_euro(project.quote_amount or 0)}")
    print(f"  Acompte       {format_euro(project.deposit_amount or 0)}")
    for i, amount in enumerate(project.progress_amounts, 1):
        print(f"  Avancement {i:<2} {format_euro(amount)}")
    print(f"  Produits      {format_euro(info.total_product_invoiced)}")
    print(f"  Payé          {format_euro(info.total_paid)} ({info.progress_percent}%)")
    print(f"  Reste         {format_euro(info.remaining)}")

    if deliverables:
        print(f"\n  {len(deliverables)} produit(s)")
        for d in deliverables:
            print(f"    - {d.name[:40]:<40} {format_euro(d.total_invoiced or 0)}")


def cmd_retroplan(args):
    """Date steps backward from a deadline: retroplan <deadline> <days> [<days> ...]."""
    if len(args) < 2:
        print("Usage: retroplan <YYYY-MM-DD> <days> [<days> ...]")
        return

    deadline, durations = args[0], args[1:]
    stubs = [
        {
            "id": f"step-{i}",
            "label": f"Étape {i}",
            "duration_days": int(days),
            "color": TASK_COLORS[(i - 1) % len(TASK_COLORS)],
        }
        for i, days in enumerate(durations, 1)
    ]
    tasks = compute_dates_from_deadline(stubs, deadline)

    print_header(f"RETROPLANNING → {deadline}")
    print_tasks(tasks)


def cmd_generate(args):
    """Generate a retroplanning from a brief file: generate <deadline> <brief.md> [client_id]."""
    if len(args) < 2:
        print("Usage: generate <YYYY-MM-DD> <brief.md> [client_id]")
        return

    from lib.retroplanning.generator import generate_retroplanning
    from lib.retroplanning.plans import save_plan

    deadline, brief_path = args[0], Path(args[1])
    client_id = args[2] if len(args) > 2 else None
    client_name = records.get_client(client_id).name if client_id else None

    with RequestContext():
        generation = generate_retroplanning(
            brief_path.read_text(encoding="utf-8"), deadline, client_name=client_name
        )

    print_header(f"RETROPLANNING IA → {generation.deadline}")
    print_tasks(generation.tasks)
    if generation.cost:
        print(
            f"\n  {generation.cost.input_tokens} / {generation.cost.output_tokens} tokens"
            f" (~${generation.cost.estimated_usd:.4f})"
        )
    if client_id:
        save_plan(client_id, generation.deadline, generation.tasks)
        print(f"  ✓ Enregistré pour {client_name}")


def cmd_init(args):
    """Create or converge the database schema."""
    path = args[0] if args else None
    result = db.run_startup_migrations(path)
    info = db.get_db_info(path)

    print_header("DATABASE")
    print(f"  Path:    {info['resolved_db_path']}")
    print(f"  Version: {info['user_version']} (target {info['target_schema_version']})")
    if result.get("tables_created"):
        print(f"  Tables created: {', '.join(result['tables_created'])}")
    if result.get("columns_added"):
        print(f"  Columns added:  {', '.join(result['columns_added'])}")


def cmd_health(args):
    """Show component health."""
    report = HealthChecker(db_path=get_store().db_path).run_all()
    print_header(f"HEALTH: {report.status.value.upper()}")
    for check in report.checks:
        icon = {"healthy": "✓", "degraded": "!", "unhealthy": "✗"}[check.status.value]
        print(f"  {icon} {check.name:<16} {check.message}")


def cmd_serve(args):
    """Run the API server."""
    import uvicorn

    from api.server import app

    port = int(args[0]) if args else config.API_PORT
    print(f"Serving on http://{config.API_HOST}:{port}")
    uvicorn.run(app, host=config.API_HOST, port=port)


def cmd_help(args):
    """Show help."""
    print_header("YAM DASHBOARD CLI")
    print("""
COMMANDS:

  billing <project_id>             Billing status of a project
  retroplan <date> <days>...       Date steps backward from a deadline
  generate <date> <brief> [client] Generate a retroplanning from a brief file
  init [db_path]                   Create or migrate the database
  health                           Show component health
  serve [port]                     Run the API server
  help                             Show this help

Dates are YYYY-MM-DD. The last step ends on the deadline.
""")


COMMANDS = {
    "billing": cmd_billing,
    "b": cmd_billing,
    "retroplan": cmd_retroplan,
    "r": cmd_retroplan,
    "generate": cmd_generate,
    "g": cmd_generate,
    "init": cmd_init,
    "health": cmd_health,
    "serve": cmd_serve,
    "help": cmd_help,
    "h": cmd_help,
}


def main():
    """Main entry point."""
    configure_from_settings()

    if len(sys.argv) < 2:
        cmd_help([])
        return

    cmd = sys.argv[1]
    args = sys.argv[2:]

    if cmd not in COMMANDS:
        print(f"Unknown command: {cmd}")
        print("Run 'help' for available commands.")
        return

    try:
        COMMANDS[cmd](args)
    except AppError as e:
        print(f"✗ {e.user_message}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"✗ {get_error_message(e)}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
