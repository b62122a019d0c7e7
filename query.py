#!/usr/bin/env python3
"""Ad hoc query runner for Recipe Planner.

Run searches and meal plans directly against an in-memory, seeded catalog.

Usage:
    python query.py "quick vegan dinner"
    python query.py --debug "pasta with mushrooms"   # Show full JSON result
    python query.py --plan demo --days 3             # Generate a meal plan for a user

Features:
- Hybrid search: catalog matches topped up with generated recipes
- Meal plan generation from the user's dietary profile
- Debug mode to display the full JSON result
"""

import asyncio
import sys

from rich.console import Console
from rich.table import Table

from recipe_planner.models.models import MealPlan, SearchResult
from recipe_planner.pipeline import initialize_pipeline
from recipe_planner.utils.logger import logger

console = Console()

USAGE = 'Usage: python query.py [--debug] "<your query>"  |  python query.py [--debug] --plan USER_ID [--days N]'


def render_search(result: SearchResult) -> None:
    table = Table(title=f'Results for "{result.query}"', show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Cuisine")
    table.add_column("Time", justify="right")
    table.add_column("Tags")
    table.add_column("Source")

    for idx, recipe in enumerate(result.recipes, start=1):
        source = "[magenta]generated[/magenta]" if recipe.is_ai_generated else "[green]catalog[/green]"
        table.add_row(
            str(idx),
            recipe.title,
            recipe.cuisine,
            f"{recipe.cooking_time} min",
            ", ".join(recipe.dietary_tags) or "-",
            source,
        )

    console.print(table)
    console.print(f"[dim]{result.catalog_count} from catalog, {result.generated_count} generated[/dim]")


def render_plan(plan: MealPlan, titles: dict[str, str]) -> None:
    table = Table(title=f"{plan.title} ({plan.start_date:%Y-%m-%d} to {plan.end_date:%Y-%m-%d})")
    table.add_column("Day", style="bold")
    for slot in ("Breakfast", "Lunch", "Dinner"):
        table.add_column(slot)

    for day in plan.meals:
        cells = [
            titles.get(recipe_id, recipe_id) if recipe_id else "[dim]-[/dim]"
            for recipe_id in (day.breakfast, day.lunch, day.dinner)
        ]
        table.add_row(day.day, *cells)
    console.print(table)


async def run_search(query: str, debug: bool = False) -> None:
    pipeline = await initialize_pipeline()
    result = await pipeline.search(query)

    if debug:
        console.print("[bold cyan]Debug Mode: Full Result[/bold cyan]")
        console.print_json(data=result.model_dump(mode="json"))
        console.print()
    render_search(result)


async def run_plan(user_id: str, days: int, debug: bool = False) -> None:
    pipeline = await initialize_pipeline()
    plan = await pipeline.assemble_plan(user_id, days)

    if debug:
        console.print("[bold cyan]Debug Mode: Full Plan[/bold cyan]")
        console.print_json(data=plan.model_dump(mode="json"))
        console.print()

    titles = {}
    for day in plan.meals:
        for recipe_id in day.recipe_ids():
            recipe = await pipeline.catalog.get_recipe(recipe_id)
            if recipe:
                titles[recipe_id] = recipe.title
    render_plan(plan, titles)


def main(argv: list[str]) -> None:
    debug_mode = False
    plan_user = None
    days = 7
    idx = 0

    while idx < len(argv) and argv[idx].startswith("--"):
        flag = argv[idx]
        if flag == "--debug":
            debug_mode = True
            idx += 1
        elif flag in ("--plan", "--days"):
            if idx + 1 >= len(argv):
                print(f"Error: {flag} flag requires a value")
                sys.exit(1)
            if flag == "--plan":
                plan_user = argv[idx + 1]
            else:
                try:
                    days = int(argv[idx + 1])
                except ValueError:
                    print(f"Error: --days must be a number, got: {argv[idx + 1]}")
                    sys.exit(1)
            idx += 2
        else:
            print(f"Unknown flag: {flag}")
            sys.exit(1)

    query = " ".join(argv[idx:])
    if not plan_user and not query.strip():
        print("Error: No query provided")
        print(USAGE)
        sys.exit(1)

    try:
        if plan_user:
            asyncio.run(run_plan(plan_user, days, debug=debug_mode))
        else:
            asyncio.run(run_search(query, debug=debug_mode))
    except KeyboardInterrupt:
        logger.info("\nQuery interrupted by user.")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Query execution failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(USAGE)
        print("")
        print("Examples:")
        print('  python query.py "quick vegan dinner"')
        print('  python query.py --debug "chickpea curry"')
        print("  python query.py --plan demo --days 3")
        sys.exit(1)

    main(sys.argv[1:])
