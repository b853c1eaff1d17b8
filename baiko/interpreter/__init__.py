"""Tree-walking interpreter: environments, runtime values, native interop and imports."""
