"""App — coração do sistema: orquestração, casos de uso e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- coordinators/: fluxos end-to-end (inbound → pipeline → outbound)
- use_cases/: casos de uso (handlers de passo por fluxo)
- middleware/: pipeline de turno (logging, erros, expiração, auth)
- services/: serviços de aplicação (assinaturas de notificação)
- infra/: implementações concretas de IO
- protocols/: contratos/interfaces
- sessions/: modelos e gerenciamento de sessão
- domain/: modelos da API de backend
- observability/: correlation_id e métricas de latência
- constants/: textos e ações do bot

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
