"""
Load GEO datasets and report their dimensions.

This script:
1. Loads each identifier concurrently through DatasetLoader.read
2. Logs the matrices produced (name, rows x columns, sample annotations)
3. Optionally writes each matrix to CSV

Usage:
    python scripts/load_geo_dataset.py GSE53986
    python scripts/load_geo_dataset.py GSE53986 GDS507 --output-dir data/geo
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from expression_matrix import DatasetLoader
from expression_matrix.core.config_manager import ConfigManager

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def print_section(title: str):
    """Print a formatted section header."""
    logger.info("=" * 80)
    logger.info(f"  {title}")
    logger.info("=" * 80)


async def load_all(loader: DatasetLoader, identifiers, timeout: float):
    """Issue one read per identifier and wait for every callback."""
    loop = asyncio.get_running_loop()
    futures = {}

    for identifier in identifiers:
        future = loop.create_future()

        def on_done(error, result, future=future):
            future.set_result((error, result))

        loader.read(identifier, on_done)
        futures[identifier] = future

    results = await asyncio.wait_for(asyncio.gather(*futures.values()), timeout)
    return dict(zip(futures.keys(), results))


def main(identifiers, config_dir: str, output_dir, timeout: float) -> int:
    print_section("GEO dataset loading")
    loader = DatasetLoader(config_manager=ConfigManager(config_dir))

    results = asyncio.run(load_all(loader, identifiers, timeout))

    failures = 0
    for identifier, (error, matrices) in results.items():
        if error is not None:
            logger.error(f"{identifier}: {error}")
            failures += 1
            continue

        for matrix in matrices:
            logger.info(
                f"{identifier}: {matrix.get_name()} "
                f"{matrix.get_row_count()} rows x {matrix.get_column_count()} columns"
            )
            logger.info(f"  Column annotations: {list(matrix.get_column_metadata())}")
            if output_dir is not None:
                output_dir.mkdir(parents=True, exist_ok=True)
                output_file = output_dir / f"{matrix.get_name()}.csv"
                matrix.to_dataframe().to_csv(output_file)
                logger.info(f"  Saved to {output_file}")

    print_section(f"Done: {len(results) - failures} loaded, {failures} failed")
    return 1 if failures else 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Load GEO datasets as expression matrices')
    parser.add_argument('identifiers', nargs='+', help='GEO accessions (GSE<n>, GSE<n>-GPL<n>, GDS<n>)')
    parser.add_argument('--config-dir', default='config', help='Directory containing settings.yaml')
    parser.add_argument('--output-dir', type=Path, default=None, help='Write each matrix to CSV here')
    parser.add_argument('--timeout', type=float, default=600, help='Overall timeout in seconds')
    args = parser.parse_args()

    sys.exit(main(args.identifiers, args.config_dir, args.output_dir, args.timeout))
