"""
Components layer.

Pure data transformations with no I/O:
- input file models (`contract_json.py`)
- contract decorator resolution (`contract_decorator.py`)
- output parameter types and event log decoding (`abi_types.py`, `event_decoder.py`)
"""
