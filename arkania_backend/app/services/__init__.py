"""Servicios con la lógica de negocio"""
