"""jiten-srs: FSRS spaced-repetition scheduling for Jiten vocabulary cards."""
