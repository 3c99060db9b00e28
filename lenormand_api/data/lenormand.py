# lenormand_api/data/lenormand.py

# Deck order of the 36 Lenormand cards, as labelled on the frontend.
LENORMAND_CARDS = (
    "O Cavaleiro", "O Trevo", "O Navio", "A Casa", "A Árvore", "As Nuvens",
    "A Serpente", "O Caixão", "O Buquê", "A Foice", "O Chicote", "Os Pássaros",
    "A Criança", "A Raposa", "O Urso", "A Estrela", "A Cegonha", "O Cachorro",
    "A Torre", "O Jardim", "A Montanha", "Os Caminhos", "Os Ratos", "O Coração",
    "O Anel", "O Livro", "A Carta", "O Homem", "A Mulher", "Os Lírios",
    "O Sol", "A Lua", "A Chave", "Os Peixes", "A Âncora", "A Cruz",
)

TIMEFRAMES = ("Passado", "Presente", "Futuro")

THEMES = ("Espiritual", "Mental", "Amor", "Saúde", "Profissional", "Financeiro")

lenormand_cards = frozenset(LENORMAND_CARDS)
timeframes = frozenset(TIMEFRAMES)
themes = frozenset(THEMES)
