import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from softmesh.builders import build_block
from softmesh.diagnostics import diagnostics_report


LAYOUT = [
    [1, 1, 1, 1],
    [1, 0, 0, 1],
    [1, 1, 1, 1],
]


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    model = build_block(LAYOUT, spacing=0.5)
    topology = model.build_topology()
    errors = model.validate()
    if errors:
        raise SystemExit("\n".join(errors))

    print("Vertices:", len(model.vertices))
    print("Faces:", len(model.faces))
    print("Borders:", sorted(model.borders))
    print(json.dumps(diagnostics_report(model, topology)["topology"]["status_counts"], indent=2))


if __name__ == "__main__":
    main()
