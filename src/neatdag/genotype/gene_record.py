"""
Gene Record Module

Classes:
    GeneRecord: Flat, layout independent description of one connection of a genome

Functions:
    align_genes: Walk two gene lists side by side, pairing genes with the same innovation number
"""

from typing import Iterator, NamedTuple, Sequence

class GeneRecord(NamedTuple):
    """
    One connection of a genome, described in terms of global node IDs.

    Because it does not refer to local node IDs, a list of gene records describes
    a genome independently of how its nodes happen to be laid out in memory. Lists
    of gene records sorted by innovation number are what crossover and the
    compatibility distance align.
    """
    from_id   : int
    to_id     : int
    innovation: int
    weight    : float
    active    : bool

    def as_dict(self) -> dict:
        return {"from_global_id"   : self.from_id,
                "to_global_id"     : self.to_id,
                "innovation_number": self.innovation,
                "weight"           : self.weight,
                "active"           : self.active}

    def __str__(self):
        s  = f"[{self.innovation:03d},{'E' if self.active else 'D'},"
        s += f"{self.from_id:02d}=>{self.to_id:02d},{self.weight:+.02f}]"
        return s

def align_genes(genes1: Sequence[GeneRecord],
                genes2: Sequence[GeneRecord]) -> Iterator[tuple[GeneRecord | None, GeneRecord | None]]:
    """
    Align two gene lists, both sorted by innovation number.

    Yields pairs in increasing order of innovation number. Genes present in
    both lists (matching genes) are yielded together; a gene present in only
    one list is yielded with None in place of the missing partner.
    """
    i = j = 0
    while i < len(genes1) or j < len(genes2):
        if j == len(genes2) or (i < len(genes1) and genes1[i].innovation < genes2[j].innovation):
            yield genes1[i], None
            i += 1
        elif i == len(genes1) or genes2[j].innovation < genes1[i].innovation:
            yield None, genes2[j]
            j += 1
        else:
            yield genes1[i], genes2[j]
            i += 1
            j += 1
