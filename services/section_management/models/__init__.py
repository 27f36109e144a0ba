from .sections import Section
