# tools/validate_guides.py
import json
import sys
from pathlib import Path

from pydantic import ValidationError

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from src.pipeline.guides import configuration_to_guides, resolve_table_request  # noqa: E402
from src.schema import TableRequest  # noqa: E402
from src.seating import engine  # noqa: E402
from src.seating.diagnostics import build_diagnostics_summary  # noqa: E402
from src.seating.plan_snapshot import layout_to_snapshot  # noqa: E402
from src.seating.spec.types import SeatingContext  # noqa: E402
from src.seating.validators import find_overlaps  # noqa: E402


class _CollectingSink:
    def __init__(self):
        self.events = []

    def emit(self, event):
        self.events.append(event)


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    path = Path(argv[0]) if argv else ROOT / "data" / "examples" / "table_rectangle.json"
    raw = json.loads(path.read_text(encoding="utf-8"))

    print("INPUT JSON:")
    print(json.dumps(raw, ensure_ascii=False, indent=2))

    try:
        request = TableRequest.model_validate(raw)
    except ValidationError as e:
        print("\nVALIDATION ERROR")
        print(e)
        return 1

    print("\nTableRequest OK")
    sink = _CollectingSink()
    ctx = SeatingContext(run_id="validate_guides", debug=True, diag=sink)
    table, effective = resolve_table_request(request, ctx)
    result = engine.allocate_layout(table, effective, ctx)

    print("\nRESOLVED GUIDES:")
    guides = configuration_to_guides(effective).model_dump(by_alias=True, exclude_none=True)
    print(json.dumps(guides, ensure_ascii=False, indent=2))

    print("\nLAYOUT SNAPSHOT:")
    print(json.dumps(layout_to_snapshot(result), ensure_ascii=False, indent=2))

    print("\nDIAGNOSTICS:")
    print(json.dumps(build_diagnostics_summary(sink.events), ensure_ascii=False, indent=2))
    for event in sink.events:
        if event.stage == "resolve":
            print(f"  {event.code} {event.path}: {event.input_value!r} -> {event.resolved_value!r}")

    overlaps = find_overlaps(result)
    if overlaps:
        print("\nOVERLAPS:")
        print(json.dumps(overlaps, ensure_ascii=False, indent=2))
        return 2
    print("\nNo overlaps")
    return 0


if __name__ == "__main__":
    sys.exit(main())
