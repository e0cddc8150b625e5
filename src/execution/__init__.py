"""Single-flight execution of translate/query requests and its state machine."""
