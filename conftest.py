# Makes the repository root importable so that tests can load the
# scripts of examples/.
