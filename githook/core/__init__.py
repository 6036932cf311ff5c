"""Githook core — decode, resolve, execute and coordinate job dispatches."""
