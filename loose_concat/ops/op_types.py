class OpType:
    # --- Manipulation ---
    LOOSE_CONCAT = "LooseConcat"
