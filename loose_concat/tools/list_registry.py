from loose_concat.backend.registry import KernelRegistry
from loose_concat.ops.registry import list_ops, get_op_class, get_reference_factory


def check():
    for op_type in list_ops():
        cls = get_op_class(op_type)
        reference = get_reference_factory(op_type)
        print(f"Op: {op_type} ({cls.__module__}.{cls.__name__})")
        print(f"  Reference: {reference.__name__ if reference else None}")
        for backend, phases in KernelRegistry.get_all_kernels().get(op_type, {}).items():
            print(f"  Backend: {backend.value}")
            for phase, func in phases.items():
                print(f"    {phase}: {func.__name__}")


if __name__ == "__main__":
    check()
