#!/usr/bin/env python3
"""Recalculate candidate percentiles and store them in assessments.report.

Stored percentiles go stale as new assessments complete; run this on a
schedule (or after a batch of evaluations) to refresh them.

    python recalculate_percentiles.py                     # every completed assessment
    python recalculate_percentiles.py --assessment-id ID  # a single assessment

Required env vars:
    SUPABASE_URL, SUPABASE_KEY
"""

import argparse
import logging
import sys

from services import assessment_store
from services.errors import SkillveeError
from services.percentile_calculator import PercentileService

log = logging.getLogger("recalculate_percentiles")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--assessment-id",
        help="only recalculate this assessment (default: all completed assessments)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(message)s",
    )
    args = parse_args(argv)

    try:
        service = PercentileService(assessment_store.get_client())
        if args.assessment_id:
            result = service.calculate_and_store_percentiles(args.assessment_id)
            if result is None:
                log.error("No percentiles stored for %s", args.assessment_id)
                return 1
            log.info(
                "Stored percentiles for %s: overall=%d of %d candidates",
                args.assessment_id, result.overall, result.total_candidates,
            )
            return 0

        updated = service.recalculate_all_percentiles()
    except SkillveeError as e:
        log.error("Percentile recalculation failed: %s", e)
        return 1

    log.info("Done: %d assessments updated", updated)
    return 0


if __name__ == "__main__":
    sys.exit(main())
