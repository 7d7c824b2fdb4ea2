#!/usr/bin/env python3
"""
Example: Qstr and Module Extraction

Demonstrates:
- Feeding preprocessed translation units to the extractors
- Interning extra qstrs requested by the host program
- Reading the generated qstr table and module registry

This shows the generation pipeline:
PREPROCESSED SOURCE -> QSTRS + MODULES -> DATA MODEL
"""

from qstrgen import BytesIn, GeneratorConfig, extract_data
from qstrgen.runtime import TranslationUnit

MODMATH_C = """\
static const mp_rom_map_elem_t mp_module_math_globals_table[] = {
    { MP_ROM_QSTR(MP_QSTR___name__), MP_ROM_QSTR(MP_QSTR_math) },
    { MP_ROM_QSTR(MP_QSTR_sqrt), MP_ROM_PTR(&mp_math_sqrt_obj) },
    { MP_ROM_QSTR(MP_QSTR_pi), mp_const_float_pi },
};
MP_REGISTER_MODULE(MP_QSTR_math, mp_module_math);
"""

MODSYS_C = """\
    { MP_ROM_QSTR(MP_QSTR___name__), MP_ROM_QSTR(MP_QSTR_sys) },
    { MP_ROM_QSTR(MP_QSTR_argv), MP_ROM_PTR(&MP_STATE_VM(mp_sys_argv_obj)) },
MP_REGISTER_EXTENSIBLE_MODULE(MP_QSTR_sys, mp_module_sys);
MP_REGISTER_MODULE_DELEGATION(mp_module_sys, mp_module_sys_attr);
"""


def main():
    print("=" * 60)
    print("Qstr and Module Extraction Example")
    print("=" * 60)
    print()

    config = GeneratorConfig(bytes_in_hash=BytesIn.ONE).with_qstr("host_callback")
    units = [
        TranslationUnit.from_text("py/modmath.c", MODMATH_C),
        TranslationUnit.from_text("py/modsys.c", MODSYS_C),
    ]

    result = extract_data(units, config)

    print("Discovered qstrs")
    print("-" * 40)
    for qstr in result.unsorted_qstrs:
        print(f"  {qstr.ident:<32} hash={qstr.hash:<4} len={qstr.length:<3} ({qstr.origin})")
    print()

    print("Modules")
    print("-" * 40)
    for module in (*result.modules, *result.extensible_modules, *result.module_delegations):
        print(f"  {module.kind.value:<18} {module.upper_name:<16} -> {module.symbol}")
    print()

    print(f"  Static qstrs: {len(result.static_qstrs)}")
    print(f"  Total qstrs: {len(result.all_qstrs)}")

    print()
    print("=" * 60)
    print("Example Complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
