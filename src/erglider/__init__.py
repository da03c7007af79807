"""ER Glider - Mermaid ER diagrams from a live database catalog."""
