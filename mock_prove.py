#!/usr/bin/env python3
"""Check a registered circuit with the mock prover.

Run with: python mock_prove.py --circuit fibonacci-columns -k 4 --a 1 --b 1

Exit status: 0 satisfied, 1 unsatisfied, 2 setup error.
"""

import argparse
import logging
import sys

from circuits import CIRCUIT_REGISTRY, get_circuit
from dev import CheckStatus, CircuitLayout, MockProverConfig, check

logger = logging.getLogger(__name__)

EXIT_CODES = {
    CheckStatus.SATISFIED: 0,
    CheckStatus.UNSATISFIED: 1,
    CheckStatus.SETUP_ERROR: 2,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Check a PLONKish circuit against a witness with the mock prover'
    )
    parser.add_argument(
        '--circuit',
        choices=sorted(CIRCUIT_REGISTRY),
        default='fibonacci-columns',
        help='Circuit to check'
    )
    parser.add_argument(
        '-k',
        type=int,
        default=None,
        help="Size exponent, the circuit gets 2^k rows (default: the circuit's own k)"
    )
    parser.add_argument('--a', type=int, default=1, help='First term f(0)')
    parser.add_argument('--b', type=int, default=1, help='Second term f(1)')
    parser.add_argument(
        '--terms',
        type=int,
        default=10,
        help='Number of sequence terms to lay out'
    )
    parser.add_argument(
        '--public',
        type=int,
        nargs='+',
        default=None,
        help='Public inputs for the instance column (default: computed from the witness)'
    )
    parser.add_argument(
        '--no-wrap',
        action='store_true',
        help='Treat rotations past the last row as a setup error instead of wrapping'
    )
    parser.add_argument(
        '--without-witnesses',
        action='store_true',
        help='Check the shape-only circuit (every witness value unknown)'
    )
    parser.add_argument(
        '--layout',
        action='store_true',
        help='Print the region layout before checking'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debug detail')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s',
    )

    circuit_cls = get_circuit(args.circuit)
    try:
        circuit = circuit_cls(args.a, args.b, args.terms)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CODES[CheckStatus.SETUP_ERROR]
    if args.without_witnesses:
        circuit = circuit.without_witnesses()

    layout = CircuitLayout.from_circuit(circuit)
    if args.layout:
        print(layout.format())
        print()

    k = args.k if args.k is not None else circuit_cls.K
    if args.public is not None:
        instances = [args.public]
    elif args.without_witnesses:
        instances = [[] for _ in range(layout.num_instance_columns)]
    else:
        instances = circuit.public_inputs()
    logger.debug("public inputs: %s", [[int(v) for v in column] for column in instances])

    config = MockProverConfig(wrap_rotations=not args.no_wrap)
    result = check(k, circuit, instances, config)
    print(result)
    return EXIT_CODES[result.status]


if __name__ == '__main__':
    sys.exit(main())
