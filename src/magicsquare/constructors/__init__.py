# Grid builders, one module per order. They trust their input: call them
# through magicsquare.engine.generate, which validates n and picks the builder.

__all__: list[str] = []
