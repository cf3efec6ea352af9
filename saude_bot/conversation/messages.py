"""User-facing message templates (Brazilian Portuguese).

Question templates may use ``{first_name}``; they are always rendered
with :func:`question` so unused placeholders are harmless.
"""

from saude_bot.conversation.states import Flow, Step

RESET_KEYWORD = "reiniciar"

QUESTIONS: dict[Flow, dict[Step, str]] = {
    Flow.NEIGHBORHOOD: {
        Step.GET_NAME: (
            "Olá! Bem-vindo ao Atendimento de Saúde de Porto Velho. "
            "Para começar, qual é o seu nome completo?"
        ),
        Step.GET_BAIRRO: (
            "Prazer, {first_name}! Para te direcionar ao posto mais próximo, "
            "em qual bairro você está?"
        ),
    },
    Flow.CITY: {
        Step.GET_NAME: (
            "Olá! Bem-vindo ao nosso Atendimento Rápido. "
            "Para começar, qual é o seu nome completo?"
        ),
        Step.GET_CITY: "Prazer, {first_name}! Agora, por favor, me informe sua cidade.",
        Step.GET_BAIRRO: "Certo! E para te direcionar melhor, em qual bairro você está?",
        Step.GET_PHONE: "Entendido. Qual o seu número de telefone com DDD?",
        Step.GET_AGE: "Obrigado. Para finalizar, qual a sua idade?",
    },
    Flow.LOCATION: {
        Step.GET_NAME: (
            "Olá, amigo(a) da estrada! Sou seu assistente de saúde. "
            "Para começarmos, qual seu nome?"
        ),
        Step.GET_AGE: "Prazer, {first_name}! Agora, por favor, me diga sua idade.",
        Step.GET_PHONE: "Entendido. E qual o seu telefone para contato?",
        Step.GET_LOCATION: (
            "Obrigado pelas informações! Para encontrar o posto de saúde mais "
            "próximo, por favor, me envie sua localização atual.\n\n"
            "Você pode fazer isso clicando no *clipe de anexo (📎)* aqui no "
            "WhatsApp, depois em *'Localização'* e em seguida em "
            "*'Localização em tempo real'* ou *'Localização atual'*."
        ),
    },
}


def question(flow: Flow, step: Step, first_name: str = "") -> str:
    return QUESTIONS[flow][step].format(first_name=first_name)


# ── City flow ───────────────────────────────────────────────────────
PROCESSING = "Excelente! Estou processando suas informações..."
THANKS = "Obrigado por utilizar nosso sistema! 😊"
FINISHED = (
    "Seu atendimento por este canal foi finalizado. "
    "Se precisar de algo mais, você pode reiniciar o processo."
)

# ── Neighborhood flow ───────────────────────────────────────────────
FACILITIES_UNAVAILABLE = (
    "Desculpe, estou com um problema para acessar a lista de postos de "
    "saúde no momento. Tente novamente mais tarde."
)

# ── Location flow ───────────────────────────────────────────────────
LOCATION_REMINDER = (
    "Por favor, me envie sua localização usando o clipe de anexo (📎) "
    "para que eu possa encontrar os postos mais próximos."
)
LOCATION_RECEIVED = (
    "Ótimo, recebi sua localização! Só um momento enquanto procuro os "
    "postos de saúde mais próximos... 🗺️"
)
REGION_NOT_FOUND = (
    "Desculpe, não consegui identificar o estado em que você está. "
    "Por favor, tente enviar a localização novamente."
)
NO_REGION_DATA = "Não encontrei dados de postos de saúde para o estado de {uf}."
NEAREST_HEADER = "Aqui estão os {count} postos de saúde mais próximos de você:"
CITY_FALLBACK_HEADER = (
    "Não encontrei postos com geolocalização, mas estes atendem "
    "em {city}:"
)
NONE_NEARBY = "Não encontrei postos de saúde com geolocalização próximos a você."
ROAD_THANKS = "Obrigado por utilizar nosso sistema! Se cuida na estrada!"
LOCATION_ERROR = (
    "Ocorreu um erro técnico ao processar sua localização. "
    "Por favor, tente novamente mais tarde."
)

UNKNOWN_STEP = "Ocorreu um erro. Por favor, reinicie o atendimento."
