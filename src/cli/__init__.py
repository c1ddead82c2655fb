"""Command-line interface modules.

main.py
    Compute built-in indicators over a candle CSV and print their results.

    Usage:
        python -m src.cli.main <data_path> [options]

    Options:
        --indicator NAME[@PANE]: Indicator to attach (repeatable)
        --calc-params NAME=P1,P2: Override calc params after adding (repeatable)
        --no-stack: Added indicators replace the others in their pane
        --rows N: Rows printed per indicator (default: 5)
        --price-precision / --volume-precision: Series precision
        --calc-timeout SECONDS: Deadline per calculation
        --fail-fast: Return from a recompute batch at the first failure
        --serialize: Serialize overlapping recomputations per indicator
        --log-level {DEBUG|INFO|WARNING|ERROR}: Logging level (default: INFO)

    Examples:
        python -m src.cli.main candles.csv --indicator MA --indicator VOL@vol_pane
        python -m src.cli.main candles.csv --indicator RSI@rsi_pane --calc-params RSI=14

logging_setup.py
    Root logger configuration (Rich on terminals, plain/JSON files).
"""
