import sys
from argparse import ArgumentParser

from llvmlite import ir

from oomangle.codegen import SymbolDeclarer
from oomangle.descriptor import entity_from_signature
from oomangle.java import java_context
from oomangle.mangle import ManglingSession
from oomangle.source import DescriptorSyntaxError, MangleContractError
from oomangle.types_ import ClassType

arg_parser = ArgumentParser(
    prog="oomangle", description="Print the C++ mangled name of a Java member"
)
arg_parser.add_argument("OWNER", type=str, help="Owning class, e.g. java/lang/Object")
arg_parser.add_argument(
    "MEMBER",
    type=str,
    nargs="?",
    help="Method as 'name.(params)result' or field as 'name:type'",
)
arg_parser.add_argument("--static", action="store_true", help="Member is static")
arg_parser.add_argument(
    "--vtable", action="store_true", help="Mangle the vtable name of OWNER"
)
arg_parser.add_argument(
    "--vtable-slots", type=int, default=0, help="Slot count for --dump-llvm"
)
arg_parser.add_argument(
    "--dump-llvm", action="store_true", help="Dump the LLVM declaration"
)


def main(argv=None) -> int:
    args = arg_parser.parse_args(argv)
    if args.vtable == (args.MEMBER is not None):
        arg_parser.error("give either MEMBER or --vtable")

    ctx = java_context()
    owner = ClassType(args.OWNER)
    try:
        if args.dump_llvm:
            ir_module = ir.Module(name=args.OWNER)
            declarer = SymbolDeclarer(ir_module, ctx)
            if args.vtable:
                declarer.declare_vtable(owner, args.vtable_slots)
            else:
                declarer.declare_entity(
                    entity_from_signature(owner, args.MEMBER, args.static)
                )
            print(ir_module)
        elif args.vtable:
            print(ManglingSession(ctx).mangle_vtable_name(owner))
        else:
            entity = entity_from_signature(owner, args.MEMBER, args.static)
            print(ManglingSession(ctx).mangle_entity_name(entity))
    except DescriptorSyntaxError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except MangleContractError:
        # panic() has already reported it
        return 134
    return 0


if __name__ == "__main__":
    sys.exit(main())
