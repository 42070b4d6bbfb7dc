"""API — camada de borda e adapters de canais.

Responsabilidades:
- Receber requests do canal (webhook Telegram)
- Validar secret e payloads
- Normalizar dados para modelos internos
- Construir payloads para APIs externas
- Falar com a API de backend e com o provedor de push

Subpastas:
- connectors/: adapters HTTP/websocket (Telegram, backend, Pusher)
- normalizers/: conversão de payloads externos → modelos internos
- payload_builders/: construção de payloads para APIs externas
- routes/: endpoints HTTP (webhook, health)

NÃO PODE conter: FSM, regras de sessão, orquestração de use cases.
"""
