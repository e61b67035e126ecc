"""
Static query catalogs.
----------------------
Each dataset variant is an ordered list of search terms run against one
source. Adding a dataset means adding one DatasetVariant to DATASETS.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from catalog_ingest.errors import UnknownDatasetError


@dataclass(frozen=True)
class CatalogQuery:
    text: str
    dataset_variant: str


@dataclass(frozen=True)
class DatasetVariant:
    name: str
    source: str
    description: str
    queries: Tuple[CatalogQuery, ...]
    max_results: int = 5
    language: str = "pt"

    def __len__(self) -> int:
        return len(self.queries)

    def slice(self, start: int, size: int) -> List[CatalogQuery]:
        return list(self.queries[start:start + size])


def _queries(variant: str, texts: Iterable[str]) -> Tuple[CatalogQuery, ...]:
    return tuple(CatalogQuery(text=text, dataset_variant=variant) for text in texts)


BRAZILIAN_BESTSELLERS = (
    "Memórias Póstumas de Brás Cubas Machado",
    "Dom Casmurro Machado de Assis",
    "Quincas Borba Machado Assis",
    "O Alienista Machado Assis",
    "A Hora da Estrela Clarice Lispector",
    "Laços de Família Clarice Lispector",
    "Perto do Coração Selvagem Clarice",
    "Grande Sertão Veredas Guimarães Rosa",
    "Capitães da Areia Jorge Amado",
    "Gabriela Cravo Canela Jorge Amado",
    "Dona Flor Dois Maridos Jorge Amado",
    "O Cortiço Aluísio Azevedo",
    "Iracema José de Alencar",
    "O Guarani José Alencar",
    "Vidas Secas Graciliano Ramos",
    "São Bernardo Graciliano Ramos",
    "O Quinze Rachel de Queiroz",
    "Quarto de Despejo Carolina Maria de Jesus",
    "Torto Arado Itamar Vieira Junior",
    "Tudo é Rio Carla Madeira",
    "A Padaria Zulema Carla Madeira",
    "Ponciá Vicêncio Conceição Evaristo",
    "Olhos d Água Conceição Evaristo",
    "Becos da Memória Conceição Evaristo",
    "O Avesso da Pele Jeferson Tenório",
    "Relato Certo Oriente Milton Hatoum",
    "Dois Irmãos Milton Hatoum",
    "Azul Corvo Adriana Lisboa",
    "Amora Natalia Borges Polesso",
    "Pequeno Manual Antirracista Djamila",
    "Lugar de Fala Djamila Ribeiro",
    "É Assim que Acaba Colleen Hoover",
    "É Assim que Começa Colleen Hoover",
    "Verity Colleen Hoover",
    "Todas as Suas Imperfeições Colleen",
    "Confesse Colleen Hoover",
    "A Culpa é das Estrelas John Green",
    "Cidades de Papel John Green",
    "Tartarugas até lá Embaixo John Green",
    "A Cinco Passos de Você",
    "Extraordinário R.J. Palacio",
    "O Sol Todos Harper Lee",
    "Orgulho Preconceito Jane Austen",
    "Razão Sensibilidade Jane Austen",
    "Emma Jane Austen",
    "O Morro dos Ventos Uivantes Emily Bronte",
    "Corte de Espinhos e Rosas Sarah Maas",
    "Corte de Névoa e Fúria Sarah Maas",
    "Corte de Asas e Ruína Sarah Maas",
    "Trono de Vidro Sarah Maas",
    "Harry Potter e a Pedra Filosofal",
    "Harry Potter e a Câmara Secreta",
    "Harry Potter Prisioneiro Azkaban",
    "Harry Potter Cálice de Fogo",
    "Harry Potter Ordem da Fênix",
    "Harry Potter Enigma do Príncipe",
    "Harry Potter Relíquias da Morte",
    "O Senhor dos Anéis Sociedade do Anel",
    "O Senhor dos Anéis As Duas Torres",
    "O Senhor dos Anéis Retorno do Rei",
    "O Hobbit Tolkien",
    "O Silmarillion Tolkien",
    "Percy Jackson Ladrão de Raios",
    "Percy Jackson Mar de Monstros",
    "As Crônicas de Nárnia CS Lewis",
    "1984 George Orwell",
    "A Revolução dos Bichos George Orwell",
    "O Conto da Aia Margaret Atwood",
    "Fahrenheit 451 Ray Bradbury",
    "Admirável Mundo Novo Aldous Huxley",
    "Jogos Vorazes Suzanne Collins",
    "Em Chamas Suzanne Collins",
    "A Esperança Suzanne Collins",
    "Divergente Veronica Roth",
    "Insurgente Veronica Roth",
    "O Iluminado Stephen King",
    "It A Coisa Stephen King",
    "O Cemitério Stephen King",
    "Carrie A Estranha Stephen King",
    "Misery Stephen King",
    "Doutor Sono Stephen King",
    "O Homem de Giz C.J. Tudor",
    "A Paciente Silenciosa Alex Michaelides",
    "Garota Exemplar Gillian Flynn",
    "O Silêncio dos Inocentes Thomas Harris",
    "Drácula Bram Stoker",
    "Frankenstein Mary Shelley",
    "A Menina que Roubava Livros Markus Zusak",
    "O Poder do Hábito Charles Duhigg",
    "Mindset Carol Dweck",
    "O Milagre da Manhã Hal Elrod",
    "Me Poupe Nathalia Arcuri",
    "Pai Rico Pai Pobre Robert Kiyosaki",
    "O Homem Mais Rico da Babilônia",
    "Os Segredos da Mente Milionária",
    "Quem Pensa Enriquece Napoleon Hill",
    "Como Fazer Amigos Influenciar Pessoas",
    "Inteligência Emocional Daniel Goleman",
    "Rápido e Devagar Daniel Kahneman",
    "Essencialismo Greg McKeown",
    "O Poder do Agora Eckhart Tolle",
    "A Coragem de Ser Imperfeito Brené Brown",
    "A Sútil Arte de Ligar o Foda-se",
    "Mais Esperto que o Diabo Napoleon Hill",
    "O Código da Inteligência Augusto Cury",
    "Sapiens Yuval Noah Harari",
    "Homo Deus Yuval Noah Harari",
    "21 Lições Século 21 Harari",
    "Uma Breve História do Tempo Hawking",
    "O Gene Siddhartha Mukherjee",
    "O Diário de Anne Frank",
    "Crime e Castigo Dostoiévski",
    "Os Irmãos Karamázov Dostoiévski",
    "Anna Kariênina Tolstói",
    "Guerra e Paz Tolstói",
    "Cem Anos de Solidão García Márquez",
    "O Amor nos Tempos do Cólera",
    "A Metamorfose Franz Kafka",
    "O Processo Franz Kafka",
    "O Grande Gatsby F. Scott Fitzgerald",
    "O Apanhador no Campo de Centeio",
    "O Pequeno Príncipe Saint-Exupéry",
    "O Alquimista Paulo Coelho",
    "Brida Paulo Coelho",
    "Onze Minutos Paulo Coelho",
    "O Zahir Paulo Coelho",
    "Veronika Decide Morrer Paulo Coelho",
    "O Diário de um Mago Paulo Coelho",
    "O Mundo de Sofia Jostein Gaarder",
    "Meditações Marco Aurélio",
    "O Príncipe Maquiavel",
    "A Arte da Guerra Sun Tzu",
    "Assim Falou Zaratustra Nietzsche",
    "O Homem em Busca de Sentido Viktor Frankl",
    "O Diário de um Banana Jeff Kinney",
    "Éramos Mentirosos E. Lockhart",
    "Fangirl Rainbow Rowell",
    "Eleanor Park Rainbow Rowell",
    "O Ladrão de Raios Rick Riordan",
    "A Maldição do Titã Rick Riordan",
    "Poemas de Fernando Pessoa",
    "Poesias Completas Drummond de Andrade",
    "Antologia Poética Vinicius de Moraes",
    "Poemas Escolhidos Cecília Meireles",
    "Flor Poesia Manuel Bandeira",
)

MEGA_PORTUGUESE_BOOKS = (
    "Memórias Póstumas de Brás Cubas",
    "Dom Casmurro Machado de Assis",
    "Quincas Borba Machado",
    "O Alienista Machado",
    "Esaú e Jacó Machado",
    "Helena Machado de Assis",
    "Memorial de Aires",
    "A Hora da Estrela Clarice",
    "Laços de Família Clarice",
    "Perto do Coração Selvagem",
    "A Paixão Segundo G.H.",
    "Água Viva Clarice",
    "Felicidade Clandestina",
    "Capitães da Areia Jorge Amado",
    "Gabriela Cravo e Canela",
    "Dona Flor e Seus Dois Maridos",
    "Tieta do Agreste",
    "Mar Morto Jorge Amado",
    "Jubiabá Jorge Amado",
    "Tenda dos Milagres",
    "Vidas Secas Graciliano",
    "São Bernardo Graciliano",
    "Angústia Graciliano Ramos",
    "Memórias do Cárcere",
    "Grande Sertão Veredas",
    "Sagarana Guimarães Rosa",
    "Primeiras Estórias",
    "O Quinze Rachel de Queiroz",
    "O Cortiço Aluísio Azevedo",
    "Iracema José de Alencar",
    "O Guarani José de Alencar",
    "Senhora José de Alencar",
    "Lucíola José de Alencar",
    "Quarto de Despejo Carolina Jesus",
    "O Tempo e o Vento",
    "Olhai os Lírios do Campo",
    "Incidente em Antares",
    "Torto Arado Itamar Vieira",
    "Tudo é Rio Carla Madeira",
    "A Padaria Zulema",
    "O Avesso da Pele Jeferson Tenório",
    "Dois Irmãos Milton Hatoum",
    "Relato de um Certo Oriente",
    "Azul Corvo Adriana Lisboa",
    "Amora Natalia Polesso",
    "Ponciá Vicêncio",
    "Olhos d Água Evaristo",
    "Becos da Memória",
    "Pequeno Manual Antirracista",
    "Lugar de Fala Djamila",
    "Quem Tem Medo Feminismo Negro",
    "O Alquimista Paulo Coelho",
    "Brida Paulo Coelho",
    "Onze Minutos Paulo Coelho",
    "O Zahir Paulo Coelho",
    "Veronika Decide Morrer",
    "O Diário de um Mago",
    "Na Margem do Rio Piedra",
    "A Espiã Paulo Coelho",
    "Hippie Paulo Coelho",
    "O Código da Inteligência Cury",
    "Ansiedade Augusto Cury",
    "O Mestre dos Mestres",
    "O Vendedor de Sonhos",
    "Nunca Desista Seus Sonhos",
    "Pais Brilhantes Professores",
    "É Assim que Acaba Colleen",
    "É Assim que Começa",
    "Verity Colleen Hoover",
    "Todas Suas Imperfeições",
    "Confesse Colleen Hoover",
    "Jamais Colleen Hoover",
    "Ugly Love Colleen",
    "Corte de Espinhos e Rosas",
    "Corte de Névoa e Fúria",
    "Corte de Asas e Ruína",
    "Casa de Terra e Sangue",
    "Trono de Vidro Sarah",
    "Harry Potter Pedra Filosofal",
    "Harry Potter Câmara Secreta",
    "Harry Potter Prisioneiro Azkaban",
    "Harry Potter Cálice Fogo",
    "Harry Potter Ordem Fênix",
    "Harry Potter Enigma Príncipe",
    "Harry Potter Relíquias Morte",
    "Senhor dos Anéis Sociedade Anel",
    "Senhor dos Anéis Duas Torres",
    "Senhor dos Anéis Retorno Rei",
    "O Hobbit Tolkien",
    "O Silmarillion",
    "Percy Jackson Ladrão Raios",
    "Percy Jackson Mar Monstros",
    "Maldição do Titã Percy",
    "Batalha do Labirinto",
    "Último Olimpiano Percy",
    "1984 George Orwell português",
    "Revolução dos Bichos Orwell",
    "Admirável Mundo Novo português",
    "Fahrenheit 451 português",
    "Conto da Aia Atwood",
    "Jogos Vorazes português",
    "Em Chamas Jogos Vorazes",
    "Divergente Veronica Roth",
    "O Iluminado Stephen King",
    "It A Coisa Stephen King",
    "O Cemitério Stephen King",
    "Carrie Estranha Stephen King",
    "Misery Stephen King",
    "Doutor Sono Stephen King",
    "O Homem de Giz Tudor",
    "Paciente Silenciosa Michaelides",
    "Garota Exemplar Flynn",
    "Garota no Trem Hawkins",
    "Código Da Vinci Dan Brown",
    "Anjos e Demônios Brown",
    "Poder do Hábito Duhigg",
    "Mindset Carol Dweck",
    "Milagre da Manhã Elrod",
    "Me Poupe Nathalia Arcuri",
    "Do Mil ao Milhão Nigro",
    "Pai Rico Pai Pobre",
    "Homem Mais Rico Babilônia",
    "Segredos Mente Milionária",
    "Quem Pensa Enriquece Hill",
    "Como Fazer Amigos Influenciar",
    "Inteligência Emocional Goleman",
    "Rápido Devagar Kahneman",
    "Poder do Agora Tolle",
    "Coragem Ser Imperfeito Brené",
    "Sutil Arte Ligar Foda",
    "Mais Esperto Diabo Hill",
    "Hábitos Atômicos James Clear",
    "Sapiens Harari português",
    "Homo Deus Harari",
    "21 Lições Século 21",
    "Breve História Tempo Hawking",
    "Diário Anne Frank",
    "Menina Roubava Livros",
    "Menino Pijama Listrado",
    "Crime Castigo Dostoiévski",
    "Irmãos Karamázov",
    "Anna Kariênina Tolstói",
    "Cem Anos Solidão Márquez",
    "Metamorfose Kafka",
    "Pequeno Príncipe Saint-Exupéry",
    "Grande Gatsby Fitzgerald",
    "Apanhador Campo Centeio",
    "Ensaio sobre Cegueira Saramago",
    "Memorial do Convento",
    "Homem Duplicado Saramago",
    "Evangelho Segundo Jesus Cristo",
    "Intermitências da Morte",
    "Livro Desassossego Pessoa",
    "Mensagem Fernando Pessoa",
    "Mundo de Sofia Gaarder",
    "Meditações Marco Aurélio",
    "O Príncipe Maquiavel",
    "Arte da Guerra Sun Tzu",
    "Homem Busca Sentido Frankl",
    "Menino Maluquinho Ziraldo",
    "Meu Pé Laranja Lima",
    "Bolsa Amarela Lygia Bojunga",
    "Sítio Picapau Amarelo",
    "Reinações Narizinho",
    "Diário Banana português",
    "Crônicas Nárnia português",
    "Poesia Drummond Andrade",
    "Antologia Vinicius Moraes",
    "Poemas Cecília Meireles",
    "Manuel Bandeira poesia",
    "Culpa Estrelas John Green",
    "Cidades Papel John Green",
    "Cinco Passos de Você",
    "Extraordinário R.J. Palacio",
    "Orgulho Preconceito Austen",
    "Morro Ventos Uivantes",
    "Comédias Vida Privada",
    "Analista de Bagé",
    "Cidade de Deus Paulo Lins",
    "Feliz Ano Velho Marcelo Paiva",
    "Cabeça Fria Coração Quente",
    "Onde os Fracos Não Têm Vez",
    "Mulheres que Correm Lobos",
    "Você Nasceu para Brilhar",
    "Propósito Vida Dirigida",
    "Poder Subconsciente Joseph Murphy",
)

# Open Library works best with author names and broad genre terms
PORTUGUESE_QUERIES = (
    "Machado de Assis",
    "Clarice Lispector",
    "Jorge Amado",
    "Érico Veríssimo",
    "Graciliano Ramos",
    "Rachel de Queiroz",
    "José Saramago",
    "Fernando Pessoa",
    "Lygia Fagundes Telles",
    "Rubem Fonseca",
    "Nélida Piñon",
    "João Ubaldo Ribeiro",
    "Luis Fernando Veríssimo",
    "Ziraldo",
    "Ana Maria Machado",
    "Monteiro Lobato",
    "Carlos Drummond de Andrade",
    "Cecília Meireles",
    "Vinicius de Moraes",
    "Mario Quintana",
    "Conceição Evaristo",
    "Djamila Ribeiro",
    "Itamar Vieira Junior",
    "Carla Madeira",
    "Jeferson Tenório",
    "Natalia Borges Polesso",
    "Milton Hatoum",
    "Adriana Lisboa",
    "Michel Laub",
    "Daniel Galera",
    "literatura brasileira",
    "romance brasileiro",
    "poesia brasileira",
    "contos brasileiros",
    "livros em português",
)


# Google Books title-restricted searches
EXPANSION_TITLES = (
    "O problema dos três corpos",
    "Mar Inquieto",
    "Antes que o café esfrie",
    "Os mentirosos",
)


DATASETS: Dict[str, DatasetVariant] = {
    "brazil": DatasetVariant(
        name="brazil",
        source="google_books",
        description="Curated Brazilian bestsellers and classics in Portuguese",
        queries=_queries("brazil", BRAZILIAN_BESTSELLERS),
        max_results=5,
    ),
    "mega": DatasetVariant(
        name="mega",
        source="google_books",
        description="Broad list of Portuguese titles for maximum coverage",
        queries=_queries("mega", MEGA_PORTUGUESE_BOOKS),
        max_results=3,
    ),
    "openlibrary": DatasetVariant(
        name="openlibrary",
        source="openlibrary",
        description="Brazilian and Portuguese authors searched on Open Library",
        queries=_queries("openlibrary", PORTUGUESE_QUERIES),
        max_results=10,
    ),
    "expansion": DatasetVariant(
        name="expansion",
        source="google_books",
        description="Specific recent titles, matched on the title field only",
        queries=_queries("expansion", (f"intitle:{title}" for title in EXPANSION_TITLES)),
        max_results=5,
    ),
}

DEFAULT_DATASET = "brazil"


def get_dataset(name: str) -> DatasetVariant:
    dataset = DATASETS.get(name)
    if dataset is None:
        raise UnknownDatasetError(f"Unknown dataset variant {name!r}")
    return dataset
