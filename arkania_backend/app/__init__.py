"""Backend del Conjunto Residencial Arkania"""
