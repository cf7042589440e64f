"""
Генерация занятий по недельному расписанию (для cron).
Запуск:
  python scripts/generate_lessons.py                       # все активные группы без занятий
  python scripts/generate_lessons.py --group-id 3          # одна группа, догенерировать горизонт
  python scripts/generate_lessons.py --months-ahead 2 --created-by 1
"""
import argparse
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir)))

from app import create_app  # noqa: E402
from blueprints.lessons.services import GenerationError  # noqa: E402
from blueprints.lessons.store import make_generator  # noqa: E402

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Generate lessons from weekly group schedules")
    p.add_argument("--group-id", type=int, default=None)
    p.add_argument("--months-ahead", type=int, default=None)
    p.add_argument("--created-by", type=int, default=None)
    p.add_argument("--config", default=os.getenv("FLASK_CONFIG", "default"))
    return p

def run(args, app=None) -> int:
    app = app or create_app(args.config)
    with app.app_context():
        months = args.months_ahead
        if months is None:
            months = app.config.get("LESSONS_MONTHS_AHEAD", 1)
        gen = make_generator(app.config)

        if args.group_id is not None:
            try:
                res = gen.generate_for_group(args.group_id, months_ahead=months, created_by=args.created_by)
            except GenerationError as e:
                print(f"group {args.group_id}: {e}", file=sys.stderr)
                return 1
            print(f"group {args.group_id}: generated={res.generated} skipped={res.skipped}")
            return 0

        results = gen.generate_for_all_groups(months_ahead=months, created_by=args.created_by)
        for r in results:
            print(f"group {r.group_id}: generated={r.generated} skipped={r.skipped}")
        print(f"total: generated={sum(r.generated for r in results)} groups={len(results)}")
    return 0

if __name__ == "__main__":
    sys.exit(run(build_parser().parse_args()))
