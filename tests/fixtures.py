"""Мини‑таблицы родства для юнит‑тестов."""
PLAIN_CSV = (
    "Indv1,Indv2,Relatedness\n"
    "A,B,0.5\n"
    "A,C,0.25\n"
    "B,C,0\n"
)

ML_RELATE_CSV = (
    "Ind1,Ind2,R,LnL.R.,U,HS,FS,PO,Relationships,Relatedness\n"
    "A,B,PO,-10.2,-14.1,-12.0,-11.5,-10.2,PO,0.5\n"
    "A,C,U,-9.8,-9.8,-10.4,-11.9,-inf,U,0.01\n"
    "B,C,FS,-8.7,-12.3,-9.9,-8.7,-inf,FS,0.3\n"
)

# две параллельные цепочки между A и B: d = 2 (вес 0.25) и d = 3 (вес 0.125)
PARALLEL_ROWS = [
    ("A", "B", 0.25),
    ("A", "B", 0.125),
]
